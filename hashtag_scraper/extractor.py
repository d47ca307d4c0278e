"""Post extraction from a rendered Twitter search page

Extraction is best-effort: a container missing any of the four fields is
dropped without complaint, and the next scroll cycle gets another look at it.
"""
from typing import List, Optional
from urllib.parse import urljoin

from selenium.common.exceptions import NoSuchElementException, StaleElementReferenceException
from selenium.webdriver.common.by import By

from .models import PostRecord

# Semantic roles only; Twitter reshuffles its markup often
POST_CONTAINER_SELECTOR = "article"
CONTENT_SELECTOR = "div[lang]"
PROFILE_LINK_SELECTOR = "div[data-testid='User-Name'] a"
STATUS_LINK_SELECTOR = "a[href*='/status/']"
TIMESTAMP_SELECTOR = "time"


def build_post(content: Optional[str], profile_href: Optional[str],
               status_href: Optional[str], date: Optional[str],
               base_url: str) -> Optional[PostRecord]:
    """Assemble a PostRecord from raw field values.

    Relative hrefs are resolved against base_url. Returns None when any field
    is missing or blank.
    """
    content = (content or "").strip()
    date = (date or "").strip()
    if not (content and profile_href and status_href and date):
        return None

    return PostRecord(
        content=content,
        author_profile_url=urljoin(base_url, profile_href),
        post_url=urljoin(base_url, status_href),
        timestamp=date,
    )


def _first_attribute(container, selector: str, attribute: str) -> Optional[str]:
    try:
        return container.find_element(By.CSS_SELECTOR, selector).get_attribute(attribute)
    except NoSuchElementException:
        return None


def _first_text(container, selector: str) -> Optional[str]:
    try:
        return container.find_element(By.CSS_SELECTOR, selector).text
    except NoSuchElementException:
        return None


def extract_posts(driver, base_url: str) -> List[PostRecord]:
    """Return the well-formed posts currently rendered on the page.

    Args:
        driver: Selenium WebDriver positioned on a search results page
        base_url: Site root used to absolutize relative links

    Returns:
        PostRecords in document order
    """
    posts = []

    for container in driver.find_elements(By.CSS_SELECTOR, POST_CONTAINER_SELECTOR):
        try:
            post = build_post(
                content=_first_text(container, CONTENT_SELECTOR),
                profile_href=_first_attribute(container, PROFILE_LINK_SELECTOR, "href"),
                status_href=_first_attribute(container, STATUS_LINK_SELECTOR, "href"),
                date=_first_attribute(container, TIMESTAMP_SELECTOR, "datetime"),
                base_url=base_url,
            )
        except StaleElementReferenceException:
            # Virtualized timeline recycled the node mid-read
            continue

        if post is not None:
            posts.append(post)

    return posts
