import logging
from typing import Optional, Union

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from img_search_api.api.dependencies import get_image_search_service
from img_search_api.api.v1.models.models import (
    ErrorResponse,
    ImageSearchResponse,
    MessageResponse,
    SearchRequest,
)
from img_search_api.services.search.image_search_service import ImageSearchService

logger = logging.getLogger(__name__)

router = APIRouter()

QUERY_REQUIRED_MESSAGE = "Query parameter 'query' is required."
NO_IMAGES_MESSAGE = "No images found for the query."

@router.post(
    "/api_img_search",
    response_model=Union[ImageSearchResponse, MessageResponse],
    responses={
        200: {
            "description": "Images found, or a message when the query matched nothing"
        },
        400: {
            "model": ErrorResponse,
            "description": "Bad Request - missing query or invalid pagination parameters",
            "content": {
                "application/json": {
                    "example": {"error": QUERY_REQUIRED_MESSAGE}
                }
            }
        },
        429: {
            "model": ErrorResponse,
            "description": "The search engine kept serving CAPTCHA pages"
        },
        502: {
            "model": ErrorResponse,
            "description": "Browser or navigation failure"
        },
        503: {
            "description": "Service Unavailable"
        }
    },
    openapi_extra={"x-no-422": True}  # Custom hint to remove 422 from schema
)
async def api_img_search(
    payload: Optional[SearchRequest] = None,
    image_search_service: Optional[ImageSearchService] = Depends(get_image_search_service)
):
    """Scrape image results (thumbnail + original URL) for a text query."""
    if payload is None or not payload.query or not payload.query.strip():
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": QUERY_REQUIRED_MESSAGE},
        )

    if image_search_service is None:
        raise HTTPException(status_code=503, detail="Image Search Service not available.")

    start = payload.resolved_start()
    count = payload.resolved_count()
    logger.info(f"Processing image search query: '{payload.query}' with start={start}, count={count}")
    images = await image_search_service.search(payload.query, start=start, count=count)

    if images:
        return ImageSearchResponse(images=images)
    return MessageResponse(message=NO_IMAGES_MESSAGE)
