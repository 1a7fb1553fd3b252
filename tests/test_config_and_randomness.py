import pytest

from img_search_api.core.config import Settings
from img_search_api.utils import randomness
from img_search_api.utils.randomness import RandomDelay, RandomUserAgent


def test_settings_defaults(tmp_path):
    s = Settings(DEBUG_DIR=tmp_path)
    assert s.API_PORT == 5000
    assert s.MAX_CAPTCHA_RETRIES == 3
    assert s.RESULT_WAIT_TIMEOUT_MS == 10000
    assert s.DEFAULT_COUNT == 30
    assert s.error_screenshot_path == tmp_path / "error_screenshot.png"
    assert s.error_html_path == tmp_path / "error_page.html"


def test_port_can_come_from_port_env(monkeypatch):
    monkeypatch.delenv("API_PORT", raising=False)
    monkeypatch.setenv("PORT", "8080")
    s = Settings()
    assert s.API_PORT == 8080


def test_settings_reject_inverted_delay_range():
    with pytest.raises(ValueError):
        Settings(SCROLL_DELAY_MIN=3.0, SCROLL_DELAY_MAX=1.0)


def test_random_delay_is_seeded_and_bounded():
    first = RandomDelay(1.0, 3.0, seed=42)
    second = RandomDelay(1.0, 3.0, seed=42)
    values = [first() for _ in range(20)]
    assert values == [second() for _ in range(20)]
    assert all(1.0 <= v <= 3.0 for v in values)


def test_random_delay_rejects_bad_range():
    with pytest.raises(ValueError):
        RandomDelay(2.0, 1.0)


def test_random_user_agent_is_seeded():
    agents = ["ua-1", "ua-2", "ua-3"]
    a = RandomUserAgent(agents, seed=3)
    b = RandomUserAgent(agents, seed=3)
    picks = [a() for _ in range(10)]
    assert picks == [b() for _ in range(10)]
    assert set(picks) <= set(agents)


def test_random_user_agent_requires_candidates():
    with pytest.raises(ValueError):
        RandomUserAgent([])


def test_settings_only_expose_scraper_fields():
    assert "APP_DIR" not in Settings.model_fields
    assert "BASE_URL" not in Settings.model_fields


def test_randomness_module_only_ships_random_strategies():
    assert not hasattr(randomness, "FixedDelay")
    assert isinstance(RandomDelay(seed=1)(), float)
