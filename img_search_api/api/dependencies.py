from typing import Optional

from img_search_api.services.search.image_search_service import ImageSearchService

# Populated by the application lifespan
app_state = {}

def get_image_search_service() -> Optional[ImageSearchService]:
    """Registered service, or None before startup finishes (the endpoint answers 503)."""
    return app_state.get("image_search_service")
