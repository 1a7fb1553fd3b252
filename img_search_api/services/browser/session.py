"""Per-request Playwright browser sessions."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable

from playwright.async_api import Page, async_playwright
from playwright_stealth import Stealth

from img_search_api.core.config import Settings
from img_search_api.utils.error_handling import BrowserSessionError
from img_search_api.utils.randomness import UserAgentStrategy

logger = logging.getLogger(__name__)

# Anything that yields a ready page for exactly one search attempt
SessionFactory = Callable[[], AsyncContextManager[Page]]


@asynccontextmanager
async def open_browser_session(settings: Settings, user_agents: UserAgentStrategy) -> AsyncIterator[Page]:
    """Launch an isolated Chromium with a random user agent and yield its page.

    The browser is closed on every exit path; errors raised by the caller
    inside the ``async with`` block propagate unchanged.
    """
    async with async_playwright() as p:
        try:
            browser = await p.chromium.launch(
                headless=settings.BROWSER_HEADLESS,
                args=settings.BROWSER_ARGS,
            )
        except Exception as e:
            logger.error(f"Failed to launch browser: {e}", exc_info=True)
            raise BrowserSessionError(f"Failed to launch browser: {e}") from e

        try:
            user_agent = user_agents()
            logger.debug(f"Opening browser context with user agent: {user_agent}")
            try:
                context = await browser.new_context(
                    user_agent=user_agent,
                    viewport={"width": settings.VIEWPORT_WIDTH, "height": settings.VIEWPORT_HEIGHT},
                )
                page = await context.new_page()
                if settings.ENABLE_STEALTH:
                    await Stealth().apply_stealth_async(page)
            except Exception as e:
                raise BrowserSessionError(f"Failed to open browser page: {e}") from e
            yield page
        finally:
            try:
                await browser.close()
            except Exception as e:
                logger.warning(f"Error while closing browser: {e}")


def make_session_factory(settings: Settings, user_agents: UserAgentStrategy) -> SessionFactory:
    """Bind settings and the user-agent strategy into a zero-argument factory."""

    def factory() -> AsyncContextManager[Page]:
        return open_browser_session(settings, user_agents)

    return factory
