from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

from img_search_api.core.config import settings

NO_ORIGINAL_URL = "N/A"

class ImageRecord(BaseModel):
    """One scraped result: thumbnail plus the original image it points to."""
    model_config = ConfigDict(frozen=True)

    thumbnail_url: str
    original_url: str = NO_ORIGINAL_URL

class SearchRequest(BaseModel):
    """Body of POST /api_img_search. ``query`` presence is checked by the endpoint."""
    query: Optional[str] = None
    start: Optional[int] = Field(default=None, ge=0, description="Pagination offset passed to the search page")
    count: Optional[int] = Field(default=None, gt=0, le=settings.MAX_COUNT,
                                 description="Number of images to return")

    def resolved_start(self) -> int:
        return self.start if self.start is not None else settings.DEFAULT_START

    def resolved_count(self) -> int:
        return self.count if self.count is not None else settings.DEFAULT_COUNT

class ImageSearchResponse(BaseModel):
    """API response structure when images were found."""
    images: List[ImageRecord]

class MessageResponse(BaseModel):
    message: str

class ErrorResponse(BaseModel):
    error: str
