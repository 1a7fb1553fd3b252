import pytest
from fastapi.testclient import TestClient

from fakes import CAPTCHA_URL, FakePage, raw_items
from img_search_api.api.dependencies import get_image_search_service
from img_search_api.api.v1.models.models import ImageRecord
from img_search_api.main import app
from img_search_api.utils.error_handling import CaptchaRetriesExhaustedError, NavigationError


class StubService:
    def __init__(self, result=None, error=None):
        self.result = result or []
        self.error = error
        self.calls = []

    async def search(self, query, start, count):
        self.calls.append((query, start, count))
        if self.error:
            raise self.error
        return self.result


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


def _use(service):
    app.dependency_overrides[get_image_search_service] = lambda: service
    return service


@pytest.mark.parametrize("body", [{}, {"query": ""}, {"query": "   "}, {"query": None}, {"start": 0, "count": 5}])
def test_missing_query_is_rejected_without_scraping(client, body):
    service = _use(StubService())
    response = client.post("/api_img_search", json=body)
    assert response.status_code == 400
    assert response.json() == {"error": "Query parameter 'query' is required."}
    assert service.calls == []


def test_missing_body_is_rejected(client):
    service = _use(StubService())
    response = client.post("/api_img_search")
    assert response.status_code == 400
    assert response.json() == {"error": "Query parameter 'query' is required."}
    assert service.calls == []


def test_defaults_applied(client):
    service = _use(StubService())
    client.post("/api_img_search", json={"query": "cats"})
    assert service.calls == [("cats", 0, 30)]


def test_images_returned(client):
    images = [ImageRecord(thumbnail_url=f"https://t/{n}.jpg", original_url=f"https://o/{n}.jpg") for n in range(3)]
    service = _use(StubService(result=images))
    response = client.post("/api_img_search", json={"query": "cats", "start": 10, "count": 3})
    assert response.status_code == 200
    assert response.json() == {"images": [i.model_dump() for i in images]}
    assert service.calls == [("cats", 10, 3)]


def test_no_images_message(client):
    _use(StubService(result=[]))
    response = client.post("/api_img_search", json={"query": "qwxzzy"})
    assert response.status_code == 200
    assert response.json() == {"message": "No images found for the query."}


def test_captcha_exhaustion_is_429(client):
    _use(StubService(error=CaptchaRetriesExhaustedError(3)))
    response = client.post("/api_img_search", json={"query": "cats"})
    assert response.status_code == 429
    assert response.json() == {"error": "Too many CAPTCHA challenges. Please try again later."}


def test_navigation_failure_is_502(client):
    _use(StubService(error=NavigationError("Failed to navigate to search page: net::ERR_FAILED")))
    response = client.post("/api_img_search", json={"query": "cats"})
    assert response.status_code == 502
    assert "net::ERR_FAILED" in response.json()["error"]


@pytest.mark.parametrize("body", [{"query": "cats", "count": 0}, {"query": "cats", "start": -1}, {"query": "cats", "count": "lots"}])
def test_invalid_pagination_is_400(client, body):
    service = _use(StubService())
    response = client.post("/api_img_search", json=body)
    assert response.status_code == 400
    assert "detail" in response.json()
    assert service.calls == []


def test_end_to_end_captcha_budget(client, make_service):
    service, factory = make_service([FakePage(redirect_url=CAPTCHA_URL) for _ in range(3)])
    _use(service)
    response = client.post("/api_img_search", json={"query": "cats", "count": 5})
    assert response.status_code == 429
    assert factory.calls == 3


def test_end_to_end_captcha_then_success(client, make_service):
    service, factory = make_service([
        FakePage(redirect_url=CAPTCHA_URL),
        FakePage(batches=[raw_items(1, 5)], heights=[1000, 1000]),
        FakePage(),
    ])
    _use(service)
    response = client.post("/api_img_search", json={"query": "cats", "start": 0, "count": 5})
    assert response.status_code == 200
    assert len(response.json()["images"]) == 5
    assert factory.calls == 2


def test_health_reports_missing_service(client):
    response = client.get("/health")
    assert response.status_code == 503


def test_root(client):
    assert client.get("/").status_code == 200


def test_missing_query_is_400_before_service_is_registered(client):
    response = client.post("/api_img_search", json={})
    assert response.status_code == 400
    assert response.json() == {"error": "Query parameter 'query' is required."}


def test_valid_query_is_503_before_service_is_registered(client):
    response = client.post("/api_img_search", json={"query": "cats"})
    assert response.status_code == 503
