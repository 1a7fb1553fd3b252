import logging
from urllib.parse import urlencode

from playwright.async_api import Page

from img_search_api.utils.error_handling import NavigationError, handle_scraping_errors

logger = logging.getLogger(__name__)


def build_search_url(base_url: str, query: str, start: int, count: int) -> str:
    """Search page URL with the query tokens joined by ``+`` and pagination params embedded."""
    params = urlencode({"text": query.strip(), "from": start, "num": count})
    return f"{base_url}?{params}"


@handle_scraping_errors("Failed to navigate to search page", exception_to_raise=NavigationError)
async def navigate(page: Page, url: str) -> None:
    """Open ``url`` and return once the initial DOM is parsed (not full resource load)."""
    logger.info(f"Navigating to {url}")
    await page.goto(url, wait_until="domcontentloaded")
