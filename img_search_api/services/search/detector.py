import logging

from playwright.async_api import Page

from img_search_api.utils.error_handling import CaptchaDetectedError

logger = logging.getLogger(__name__)


def is_captcha_page(url: str, marker: str = "showcaptcha") -> bool:
    return bool(url) and marker in url


def ensure_not_blocked(page: Page, marker: str = "showcaptcha") -> None:
    """Raise CaptchaDetectedError if the page was redirected to the block page."""
    url = page.url
    if is_captcha_page(url, marker):
        logger.warning(f"CAPTCHA block page detected: {url}")
        raise CaptchaDetectedError(url)
