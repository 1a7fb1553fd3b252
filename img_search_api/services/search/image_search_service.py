import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Optional

from img_search_api.api.v1.models.models import ImageRecord
from img_search_api.core.config import Settings
from img_search_api.services.browser.diagnostics import capture_diagnostics
from img_search_api.services.browser.session import SessionFactory, make_session_factory
from img_search_api.services.search.collector import ImageCollector
from img_search_api.services.search.detector import ensure_not_blocked
from img_search_api.services.search.navigator import build_search_url, navigate
from img_search_api.utils.error_handling import CaptchaDetectedError, CaptchaRetriesExhaustedError
from img_search_api.utils.randomness import DelayStrategy, RandomDelay, RandomUserAgent

logger = logging.getLogger(__name__)


class ImageSearchService:
    def __init__(self,
                 settings: Settings,
                 session_factory: SessionFactory,
                 delay_strategy: Optional[DelayStrategy] = None,
                 sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep):
        self.settings = settings
        self.session_factory = session_factory
        self.delay_strategy = delay_strategy or RandomDelay(
            settings.SCROLL_DELAY_MIN, settings.SCROLL_DELAY_MAX, seed=settings.RANDOM_SEED
        )
        self.sleep = sleep

    @classmethod
    def from_settings(cls, settings: Settings) -> "ImageSearchService":
        """Wire up real browser sessions with the configured random strategies."""
        user_agents = RandomUserAgent(settings.USER_AGENTS, seed=settings.RANDOM_SEED)
        return cls(settings=settings, session_factory=make_session_factory(settings, user_agents))

    async def search(self, query: str, start: int, count: int) -> List[ImageRecord]:
        """Scrape up to ``count`` unique images, retrying whenever the block page appears.

        Raises CaptchaRetriesExhaustedError once every attempt hit the block page.
        Any non-CAPTCHA outcome, even an empty one, is returned without retrying.
        """
        attempts = self.settings.MAX_CAPTCHA_RETRIES
        for attempt in range(1, attempts + 1):
            try:
                images = await self.run_attempt(query, start, count)
            except CaptchaDetectedError:
                logger.warning(f"CAPTCHA detected. Retrying... ({attempt}/{attempts})")
                if attempt < attempts and self.settings.CAPTCHA_RETRY_DELAY > 0:
                    await self.sleep(self.settings.CAPTCHA_RETRY_DELAY)
                continue
            logger.info(f"Search for query '{query}' completed with {len(images)} images on attempt {attempt}")
            return images

        raise CaptchaRetriesExhaustedError(attempts)

    async def run_attempt(self, query: str, start: int, count: int) -> List[ImageRecord]:
        """One browser session: navigate, check for the block page, then collect.

        Navigation and launch failures propagate as ScrapingError. Failures
        during collection are logged and diagnosed to disk, and whatever was
        gathered so far is returned.
        """
        url = build_search_url(self.settings.SEARCH_BASE_URL, query, start, count)
        async with self.session_factory() as page:
            await navigate(page, url)
            ensure_not_blocked(page, self.settings.CAPTCHA_URL_MARKER)

            collector = ImageCollector(
                page,
                count=count,
                selector=self.settings.RESULT_ITEM_SELECTOR,
                wait_timeout_ms=self.settings.RESULT_WAIT_TIMEOUT_MS,
                delay_strategy=self.delay_strategy,
                sleep=self.sleep,
            )
            try:
                return await collector.collect()
            except Exception as e:
                logger.error(f"Scraping failed for query '{query}': {e}", exc_info=True)
                await capture_diagnostics(page, self.settings)
                return collector.results()
