import pytest

from fakes import FakeSessionFactory, FixedDelay, no_sleep
from img_search_api.core.config import Settings
from img_search_api.services.search.image_search_service import ImageSearchService


@pytest.fixture
def test_settings(tmp_path):
    return Settings(DEBUG_DIR=tmp_path, MAX_CAPTCHA_RETRIES=3, CAPTCHA_RETRY_DELAY=0.0, RANDOM_SEED=7)


@pytest.fixture
def make_service(test_settings):
    def _make(pages):
        factory = FakeSessionFactory(pages)
        service = ImageSearchService(
            settings=test_settings,
            session_factory=factory,
            delay_strategy=FixedDelay(0.0),
            sleep=no_sleep,
        )
        return service, factory
    return _make
