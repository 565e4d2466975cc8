"""Test the HTTP layer: pages, portal endpoint and error mapping."""
import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from patterns.domain_config import AppConfig, NoAccessBehavior
from verticals.bookstore.users import GUEST_USER, get_user


@pytest.fixture
def client():
    app = create_app(AppConfig.default(user_reader=get_user))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def guest_client():
    app = create_app(AppConfig.default(user_reader=lambda: GUEST_USER))
    with TestClient(app) as test_client:
        yield test_client


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert "book-list" in response.json()["models"]


def test_home_page(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "<h1>Home</h1>" in response.text
    assert "Hello world!" in response.text


def test_book_page(client):
    response = client.get("/book/3")
    assert response.status_code == 200
    assert 'data-book-key="3"' in response.text


def test_static_script(client):
    response = client.get("/public/scripts/portal.js")
    assert response.status_code == 200
    assert "callPortal" in response.text


def test_book_list(client):
    response = client.post("/api/book-list/get-all", json={"$isEmpty": True})
    assert response.status_code == 200
    body = response.json()
    assert body["modelType"] == "ReadOnlyRootCollection"
    assert body["totalItems"] == 6


def test_empty_body(client):
    response = client.post("/api/book-list/get-all")
    assert response.status_code == 200
    assert response.json()["totalItems"] == 6


def test_insert_then_remove(client):
    response = client.post("/api/books/insert", json={"author": "A", "title": "T"})
    assert response.status_code == 200
    key = response.json()["bookKey"]

    response = client.post("/api/book/remove", json={"method": "get", "filter": key})
    assert response.status_code == 200
    assert response.json() is None

    response = client.post("/api/book/get", json={"$filter": key})
    assert response.status_code == 404


def test_command(client):
    response = client.post(
        "/api/find-bestseller/in-year-by-tags", json={"publishYear": 1961, "tag1": "satire"}
    )
    assert response.status_code == 200
    assert response.json()["result"]["author"] == "Joseph Heller"


@pytest.mark.parametrize("url", [
    "/api/books",
    "/api/magazines/get-all",
    "/api/book-list/get-some",
])
def test_not_found_errors(client, url):
    response = client.post(url, json={})
    assert response.status_code == 404


@pytest.mark.parametrize("url, body", [
    ("/api/find-bestseller/schema", {}),
    ("/api/find-bestseller/dao", {}),
    ("/api/book-view/remove", {"method": "get", "filter": 1}),
])
def test_non_methods_are_not_found(client, url, body):
    response = client.post(url, json=body)
    assert response.status_code == 404
    assert response.json()["error"] == "InvalidMethodError"


def test_malformed_json(client):
    response = client.post(
        "/api/book-list/get-all", content=b"{not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json()["error"] == "InvalidRequestBodyError"


def test_invalid_update_body(client):
    response = client.post("/api/book/update", json={"filter": 1})
    assert response.status_code == 400


def test_validation_error(client):
    response = client.post("/api/book/insert", json={"title": "T", "price": -5})
    assert response.status_code == 422
    body = response.json()
    assert body["model"] == "Book"
    assert body["brokenRules"][0]["property"] == "price"


def test_forbidden(guest_client):
    response = guest_client.post("/api/admin/book-list/get-all", json={"$isEmpty": True})
    assert response.status_code == 403
    assert response.json()["model"] == "admin/BookList"


def test_show_warning_behavior():
    config = AppConfig.default(
        user_reader=lambda: GUEST_USER, no_access_behavior=NoAccessBehavior.SHOW_WARNING
    )
    with TestClient(create_app(config)) as client:
        response = client.post("/api/admin/book-list/get-all", json={"$isEmpty": True})
    assert response.status_code == 200
    assert response.json()["collection"] == []


def test_custom_api_url():
    config = AppConfig.default(api_url="/services", user_reader=get_user)
    with TestClient(create_app(config)) as client:
        assert client.post("/services/book-list/get-all", json={}).status_code == 200
        assert client.post("/api/book-list/get-all", json={}).status_code in (404, 405)
