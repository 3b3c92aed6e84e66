from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
import logging
import re

from api.config import settings
from scrapers.base import InvalidRequest
from scrapers.manager import ScraperManager
from scrapers.utils.normalizers import normalize_source_keys

# Setup logging directory
settings.log_dir.mkdir(exist_ok=True)


# Custom formatter to strip ANSI color codes from file logs
class ColorStripFormatter(logging.Formatter):
    """Formatter that strips ANSI color codes from log messages."""
    ansi_escape = re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')

    def format(self, record):
        message = super().format(record)
        return self.ansi_escape.sub('', message)


# Setup logging with color support for console, stripped for file
file_handler = logging.FileHandler(settings.log_file, encoding='utf-8')
file_handler.setFormatter(ColorStripFormatter(settings.log_format))

console_handler = logging.StreamHandler()
console_handler.setFormatter(logging.Formatter(settings.log_format))

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    handlers=[file_handler, console_handler],
    force=True  # Override any existing configuration
)

# Scraper loggers get their own handlers and do not propagate,
# so each message appears once
scraper_logger = logging.getLogger('scraper')
scraper_logger.propagate = False
# Only add handlers if not already present (prevents duplicates on module reload)
if not scraper_logger.handlers:
    scraper_file_handler = logging.FileHandler(settings.log_file, encoding='utf-8')
    scraper_file_handler.setFormatter(ColorStripFormatter(settings.log_format))
    scraper_logger.addHandler(scraper_file_handler)

    scraper_console_handler = logging.StreamHandler()
    scraper_console_handler.setFormatter(logging.Formatter(settings.log_format))
    scraper_logger.addHandler(scraper_console_handler)
scraper_logger.setLevel(getattr(logging, settings.log_level.upper()))

logger = logging.getLogger(__name__)


# Filter to suppress noisy polling endpoint access logs
class PollingEndpointFilter(logging.Filter):
    # Endpoints that poll frequently and clutter logs
    SUPPRESSED_ENDPOINTS = ['/health']

    def filter(self, record):
        msg = record.getMessage()
        for endpoint in self.SUPPRESSED_ENDPOINTS:
            if endpoint in msg:
                return False
        return True

# Apply filter to uvicorn access logger at module load time
uvicorn_access_logger = logging.getLogger("uvicorn.access")
uvicorn_access_logger.addFilter(PollingEndpointFilter())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Builds the source registry once; each search launches its own browser.
    """
    # Startup
    logger.info("=" * 60)
    logger.info("Hotel Search Backend Starting Up")
    logger.info("=" * 60)
    logger.info(f"Log file: {settings.log_file}")
    logger.info(f"Browser: {settings.browser_executable_path or 'bundled Chromium'}")
    app.state.manager = ScraperManager(settings=settings)
    logger.info(f"Sources: {', '.join(app.state.manager.scrapers)}")
    logger.info(f"Hotel scraper server running on port {settings.api_port}")

    yield  # Application runs here

    # Shutdown
    logger.info("Shutdown complete")


app = FastAPI(
    title="Hotel Search API",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware - allow all origins
# Note: allow_credentials must be False when allow_origins is ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/favicon.ico", include_in_schema=False)
async def favicon():
    """Return empty response for favicon requests"""
    return Response(status_code=204)


# Pydantic models for API responses
class HotelResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    location: str = ""
    description: str = ""
    website_url: str = Field("", alias="websiteURL")
    image_url: str = Field("", alias="imageURL")
    source: str
    city: str = ""
    country: str = ""
    source_url: str = Field("", alias="sourceURL")


class SearchResponse(BaseModel):
    hotels: List[HotelResponse]
    count: int


class SourceResponse(BaseModel):
    key: str
    name: str
    enabled: bool
    implemented: bool
    url: str


def get_manager(request: Request) -> ScraperManager:
    """Return the app's ScraperManager, creating it if lifespan did not run."""
    manager = getattr(request.app.state, "manager", None)
    if manager is None:
        manager = request.app.state.manager = ScraperManager(settings=settings)
    return manager


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/sources", response_model=List[SourceResponse])
async def get_sources(manager: ScraperManager = Depends(get_manager)):
    """List configured hotel sources."""
    return manager.list_scrapers()


@app.get(
    "/search",
    response_model=SearchResponse,
    responses={400: {"description": "Missing query"}, 500: {"description": "Search failed"}},
)
async def search(
    query: Optional[str] = Query(None, description="Free-text hotel query"),
    sourcesParam: Optional[str] = Query(None, description="Comma-separated source keys"),
    manager: ScraperManager = Depends(get_manager),
):
    """
    Search hotel sources for a query.

    Sources that fail contribute nothing; the request still succeeds.
    """
    if not query or not query.strip():
        return JSONResponse(status_code=400, content={"error": "Query parameter is required"})

    source_keys = normalize_source_keys(sourcesParam) if sourcesParam else None

    try:
        result = await manager.search(query, source_keys)
    except InvalidRequest:
        return JSONResponse(status_code=400, content={"error": "Query parameter is required"})
    except Exception as e:
        logger.error(f"Search error: {e}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Search failed"})

    return result.to_dict()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        access_log=True,
        log_config=None,  # Keep the logging configured above
        timeout_keep_alive=5,
        timeout_graceful_shutdown=5.0,
    )
