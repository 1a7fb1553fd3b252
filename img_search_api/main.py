#!/usr/bin/env python

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.openapi.utils import get_openapi
import uvicorn

# Configuration
from img_search_api.core.config import settings, ensure_configured_dirs

# Services and Utilities
from img_search_api.api.dependencies import app_state
from img_search_api.services.search.image_search_service import ImageSearchService
from img_search_api.utils.error_handling import CaptchaRetriesExhaustedError, ScrapingError
from img_search_api.api.v1.endpoints import search as search_router_module

# Configure logging (move comprehensive config elsewhere if needed)
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)
logger = logging.getLogger(__name__)

CAPTCHA_EXHAUSTED_MESSAGE = "Too many CAPTCHA challenges. Please try again later."

# --- Lifespan Manager --- #
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan events: build services on startup."""
    logger.info("Application startup: Initializing services...")
    try:
        ensure_configured_dirs() # Ensure dirs exist on startup

        app_state["image_search_service"] = ImageSearchService.from_settings(settings)
        logger.info(
            f"Image search service initialized (headless={settings.BROWSER_HEADLESS}, "
            f"stealth={settings.ENABLE_STEALTH}, max_retries={settings.MAX_CAPTCHA_RETRIES})."
        )

    except Exception as e:
        logger.exception("Fatal error during application resource initialization.")
        raise RuntimeError("Application startup failed.") from e

    yield # Application runs here

    logger.info("Application shutdown: Cleaning up resources...")
    app_state.clear()

# Create FastAPI app with lifespan manager
app = FastAPI(
    title="Image Search Scraper API",
    description="API returning thumbnail and original image URLs scraped from Yandex Images",
    version="1.0.0",
    lifespan=lifespan
)

# --- Custom OpenAPI Schema to Remove 422 Responses --- #
def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )

    # Validation errors are reported as 400, not 422
    for path in openapi_schema["paths"]:
        for method in openapi_schema["paths"][path]:
            responses = openapi_schema["paths"][path][method].get("responses")
            if responses and "422" in responses:
                if "400" not in responses:
                    responses["400"] = responses["422"]
                    responses["400"]["description"] = "Bad Request - Invalid input parameters"
                del responses["422"]

    app.openapi_schema = openapi_schema
    return app.openapi_schema

app.openapi = custom_openapi

# --- Exception Handlers --- #

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,  # Changed from 422 to 400
        content={"detail": exc.errors()},
    )

@app.exception_handler(CaptchaRetriesExhaustedError)
async def captcha_exhausted_exception_handler(request: Request, exc: CaptchaRetriesExhaustedError):
    logger.warning(f"Giving up after {exc.attempts} CAPTCHA attempts")
    return JSONResponse(
        status_code=429, # Too Many Requests
        content={"error": CAPTCHA_EXHAUSTED_MESSAGE},
    )

@app.exception_handler(ScrapingError)
async def scraping_exception_handler(request: Request, exc: ScrapingError):
    logger.error(f"Scraping error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=502, # Bad Gateway: the upstream page or browser failed
        content={"error": f"Image search failed: {exc}"},
    )

# Generic handler for unexpected errors
@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500, # Internal Server Error
        content={"message": "An unexpected internal server error occurred."},
    )

# --- Middleware --- #

# Add CORS middleware using settings
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# --- Routers --- #

app.include_router(
    search_router_module.router,
    tags=["search"],
)

# --- API Root --- #
@app.get("/",
    description="Welcome endpoint providing basic information about the Image Search Scraper API."
)
async def read_root():
    return {"message": "Welcome to the Image Search Scraper API. POST a query to /api_img_search."}

# --- Health Check --- #
@app.get("/health",
    description="Health check endpoint to verify API services are running properly."
)
async def health_check():
    if "image_search_service" in app_state:
        return {"status": "ok"}
    raise HTTPException(status_code=503, detail="Service not ready. Missing: ['image_search_service']")

# --- Main Execution --- #

def run() -> None:
    logger.info(f"Starting server on {settings.API_HOST}:{settings.API_PORT}")
    # uvicorn traps SIGINT/SIGTERM: stops accepting connections, then drains
    # in-flight requests for at most SHUTDOWN_TIMEOUT seconds before exiting.
    uvicorn.run(
        "img_search_api.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=False,
        log_level=logging.INFO,
        timeout_graceful_shutdown=settings.SHUTDOWN_TIMEOUT,
    )

if __name__ == "__main__":
    run()
