"""Debug artifacts captured when a scrape fails for a non-CAPTCHA reason."""

import logging
from pathlib import Path
from typing import Optional, Tuple

from playwright.async_api import Page

from img_search_api.core.config import Settings
from img_search_api.utils.error_handling import best_effort
from img_search_api.utils.file_ops import ensure_directory, write_text_file

logger = logging.getLogger(__name__)


@best_effort("Failed to save error screenshot")
async def save_screenshot(page: Page, path: Path) -> Optional[Path]:
    ensure_directory(path.parent)
    await page.screenshot(path=str(path))
    return path


@best_effort("Failed to save error page HTML")
async def save_page_html(page: Page, path: Path) -> Optional[Path]:
    html = await page.content()
    return write_text_file(path, html)


async def capture_diagnostics(page: Page, settings: Settings) -> Tuple[Optional[Path], Optional[Path]]:
    """Persist a screenshot and the rendered HTML, overwriting earlier dumps.

    Never raises; a failed artifact is reported as ``None``.
    """
    screenshot = await save_screenshot(page, settings.error_screenshot_path)
    html = await save_page_html(page, settings.error_html_path)
    logger.info(f"Saved scrape diagnostics (screenshot={screenshot}, html={html})")
    return screenshot, html
