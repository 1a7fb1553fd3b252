import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional
from urllib.parse import parse_qs, urlparse

from playwright.async_api import Page

from img_search_api.api.v1.models.models import NO_ORIGINAL_URL, ImageRecord
from img_search_api.utils.randomness import DelayStrategy, RandomDelay

logger = logging.getLogger(__name__)

SCROLL_HEIGHT_JS = "document.body.scrollHeight"
SCROLL_TO_BOTTOM_JS = "window.scrollTo(0, document.body.scrollHeight)"
# Raw hrefs come back to Python so the img_url parsing stays testable
EXTRACT_ITEMS_JS = """
(selector) => Array.from(document.querySelectorAll(selector)).map(item => {
    const img = item.querySelector('img');
    const link = item.querySelector('a');
    return {
        thumbnail: img ? img.src : null,
        href: link ? link.href : null,
    };
})
"""


def parse_original_url(href: Optional[str]) -> str:
    """Pull the ``img_url`` query parameter out of a result link, or "N/A"."""
    if not href:
        return NO_ORIGINAL_URL
    values = parse_qs(urlparse(href).query).get("img_url")
    if not values or not values[0]:
        return NO_ORIGINAL_URL
    return values[0]


def parse_items(raw_items: Optional[Iterable[Dict[str, Any]]]) -> List[ImageRecord]:
    """Turn the page's raw item dicts into records, skipping items without a thumbnail."""
    records = []
    for item in raw_items or []:
        thumbnail = (item or {}).get("thumbnail")
        if not thumbnail:
            continue
        records.append(ImageRecord(thumbnail_url=thumbnail, original_url=parse_original_url(item.get("href"))))
    return records


class SeenImages:
    """Ordered, deduplicated accumulation of records keyed by ``original_url``.

    The first record seen for a key wins; later duplicates are dropped.
    """

    def __init__(self):
        self._records: Dict[str, ImageRecord] = {}

    def add_batch(self, batch: Iterable[ImageRecord]) -> int:
        added = 0
        for record in batch:
            if record.original_url in self._records:
                continue
            self._records[record.original_url] = record
            added += 1
        return added

    def __len__(self) -> int:
        return len(self._records)

    def first(self, count: int) -> List[ImageRecord]:
        return list(self._records.values())[:count]


class ImageCollector:
    """Scrolls an infinite-scroll result page, accumulating unique records.

    Stops once ``count`` records are collected or a scroll no longer grows the
    page. Height-based end detection is a heuristic: a page that loads slowly
    can end collection early.
    """

    def __init__(
        self,
        page: Page,
        count: int,
        selector: str = ".SerpItem",
        wait_timeout_ms: int = 10000,
        delay_strategy: Optional[DelayStrategy] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.page = page
        self.count = count
        self.selector = selector
        self.wait_timeout_ms = wait_timeout_ms
        self.delay_strategy = delay_strategy or RandomDelay()
        self.sleep = sleep
        self.seen = SeenImages()

    async def collect(self) -> List[ImageRecord]:
        """Run the scroll loop. Errors propagate; ``results()`` still holds partial data."""
        await self.page.wait_for_selector(self.selector, timeout=self.wait_timeout_ms)
        last_height = await self.page.evaluate(SCROLL_HEIGHT_JS)

        while len(self.seen) < self.count:
            raw_items = await self.page.evaluate(EXTRACT_ITEMS_JS, self.selector)
            added = self.seen.add_batch(parse_items(raw_items))
            logger.debug(f"Extracted {added} new images ({len(self.seen)}/{self.count})")

            await self.page.evaluate(SCROLL_TO_BOTTOM_JS)
            await self.sleep(self.delay_strategy())

            new_height = await self.page.evaluate(SCROLL_HEIGHT_JS)
            if new_height == last_height:
                logger.debug(f"Page height unchanged at {new_height}; no more results loading")
                break
            last_height = new_height

        return self.results()

    def results(self) -> List[ImageRecord]:
        return self.seen.first(self.count)
