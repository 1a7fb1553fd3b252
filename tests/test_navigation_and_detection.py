import asyncio

import pytest

from fakes import CAPTCHA_URL, FakePage
from img_search_api.services.search.detector import ensure_not_blocked, is_captcha_page
from img_search_api.services.search.navigator import build_search_url, navigate
from img_search_api.utils.error_handling import CaptchaDetectedError, NavigationError

BASE = "https://yandex.com/images/search"


def test_build_search_url_joins_query_tokens():
    assert build_search_url(BASE, "red panda cub", 0, 30) == f"{BASE}?text=red+panda+cub&from=0&num=30"


def test_build_search_url_encodes_special_characters():
    url = build_search_url(BASE, " cats & dogs ", 60, 10)
    assert url == f"{BASE}?text=cats+%26+dogs&from=60&num=10"


def test_navigate_waits_for_dom_content_loaded():
    page = FakePage()
    asyncio.run(navigate(page, f"{BASE}?text=cats"))
    assert page.visited == [(f"{BASE}?text=cats", "domcontentloaded")]


def test_navigate_wraps_failures():
    page = FakePage(goto_error=RuntimeError("Timeout 30000ms exceeded"))
    with pytest.raises(NavigationError):
        asyncio.run(navigate(page, BASE))


def test_is_captcha_page():
    assert is_captcha_page(CAPTCHA_URL)
    assert not is_captcha_page(f"{BASE}?text=cats")
    assert not is_captcha_page("")
    assert is_captcha_page("https://example.com/blocked", marker="blocked")


def test_ensure_not_blocked_raises_on_block_page():
    page = FakePage()
    page.url = CAPTCHA_URL
    with pytest.raises(CaptchaDetectedError) as excinfo:
        ensure_not_blocked(page)
    assert excinfo.value.url == CAPTCHA_URL


def test_ensure_not_blocked_allows_results_page():
    page = FakePage()
    page.url = f"{BASE}?text=cats"
    ensure_not_blocked(page)
