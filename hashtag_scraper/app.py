"""FastAPI application for the scraper service

Provides REST API endpoints for:
- Health checking
- Parallel post scraping
"""
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from . import __version__
from .config import ScraperConfig
from .errors import OrchestrationError, ValidationError
from .limiter import ConcurrencyLimiter
from .models import ScrapeRequest
from .orchestrator import ScrapeOrchestrator, validate_request
from .scraper_logging import log

# Initialize configuration, orchestrator and request queue
config = ScraperConfig()
orchestrator = ScrapeOrchestrator(config)
request_queue = ConcurrencyLimiter(
    config.request_concurrency,
    interval=config.request_interval,
    interval_cap=config.request_interval_cap,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - startup and shutdown"""
    log.info("app", "startup", "Scraper service started",
             parallelism=config.parallelism, pool_size=config.pool_size)
    yield
    # Shutdown
    orchestrator.shutdown()


# Create FastAPI app
app = FastAPI(
    title="Hashtag Scraper Service",
    description="Parallel headless-browser scraping of Twitter search results",
    version=__version__,
    lifespan=lifespan
)


# === Request/Response Models ===

class ScrapeRequestBody(BaseModel):
    """Request model for a scrape

    Kept permissive so that missing or out-of-range values reach
    validate_request and come back as a 400 with a readable message.
    """
    model_config = ConfigDict(populate_by_name=True)

    auth_token: str = Field("", alias="authToken")
    search_term: str = Field("", alias="searchTerm")
    total_count: Any = Field(None, alias="totalCount")


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    log.warning("app", "bad_request", "Malformed request body", errors=exc.errors())
    return error_response(400, "Invalid request body.")


# === API Endpoints ===

@app.get("/")
async def root():
    return {
        "service": "Hashtag Scraper",
        "version": __version__,
        "status": "ready",
        "endpoints": {
            "health": "/health",
            "scrape": "/scrape"
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    pool_stats = orchestrator.pool.stats()
    if pool_stats["closed"]:
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "pool": pool_stats}
        )
    return {
        "status": "healthy",
        "pool": pool_stats,
        "queue": {
            "active": request_queue.active,
            "pending": request_queue.pending,
            "concurrency": request_queue.concurrency
        }
    }


@app.post("/scrape")
def scrape_posts(body: ScrapeRequestBody):
    """Scrape Twitter search results for a term

    Args:
        authToken: Value for the auth_token cookie
        searchTerm: Search terms (e.g., "#python")
        totalCount: Number of posts wanted

    Returns:
        JSON with at most totalCount posts

    Errors:
        400 for missing/invalid fields
        502 when every browser instance failed to navigate
        500 for anything else
    """
    request = ScrapeRequest(
        auth_token=body.auth_token,
        search_term=body.search_term,
        total_count=body.total_count,
    )

    try:
        # Reject bad input before it waits in the queue
        validate_request(request)
        posts = request_queue.run(orchestrator.run, request)
    except ValidationError as e:
        return error_response(400, str(e))
    except OrchestrationError as e:
        log.error("app", "scrape_failed", "No worker could reach the search page", error=str(e))
        return error_response(502, "Could not load search results.")
    except Exception as e:
        log.error("app", "scrape_error", "Scraping error", error=str(e), error_type=type(e).__name__)
        return error_response(500, "Failed to scrape posts.")

    return {"posts": [post.to_dict() for post in posts]}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.host, port=config.port)
