#!/usr/bin/env python3
"""
Smoke check for a running scraper service

Usage:
    SCRAPER_AUTH_TOKEN=... python scripts/check_service.py [base_url]
"""
import json
import os
import sys

import requests


BASE_URL = "http://localhost:8888"


def print_section(title):
    """Print a section header"""
    print()
    print("=" * 60)
    print(f"  {title}")
    print("=" * 60)
    print()


def check_health(base_url):
    """Check the health endpoint"""
    print_section("Checking Health Endpoint")

    try:
        response = requests.get(f"{base_url}/health", timeout=5)
    except requests.exceptions.ConnectionError:
        print("❌ Cannot connect to scraper service")
        print("   Is it running? Try: python -m hashtag_scraper.app")
        return False

    print(f"Status Code: {response.status_code}")
    print(f"Response: {json.dumps(response.json(), indent=2)}")
    return response.status_code == 200


def check_scrape(base_url, auth_token, search_term="#python", total_count=5):
    """Run a small scrape"""
    print_section("Checking Scrape Endpoint")
    print(f"Searching for: '{search_term}' ({total_count} posts)")

    try:
        response = requests.post(
            f"{base_url}/scrape",
            json={"authToken": auth_token, "searchTerm": search_term, "totalCount": total_count},
            timeout=300,  # browser automation is slow
        )
    except requests.exceptions.RequestException as e:
        print(f"❌ Error: {e}")
        return False

    print(f"Status Code: {response.status_code}")
    if response.status_code != 200:
        print(f"❌ Scrape failed: {response.text}")
        return False

    posts = response.json().get("posts", [])
    print(f"✅ Got {len(posts)} posts")
    for i, post in enumerate(posts, 1):
        print(f"Post {i}:")
        print(f"  URL: {post.get('url')}")
        print(f"  Date: {post.get('date')}")
        print(f"  Text: {post.get('content', '')[:100]}")

    return len(posts) <= total_count


def main():
    base_url = sys.argv[1] if len(sys.argv) > 1 else BASE_URL
    auth_token = os.environ.get("SCRAPER_AUTH_TOKEN", "")

    if not check_health(base_url):
        print("\n❌ Health check failed")
        return 1

    if not auth_token:
        print("\n⚠️  SCRAPER_AUTH_TOKEN not set - skipping scrape check")
        return 0

    if not check_scrape(base_url, auth_token):
        return 1

    print()
    print("✅ Scraper service is operational")
    return 0


if __name__ == "__main__":
    sys.exit(main())
