"""Tests for the JSON catalog API and the health check."""

from conftest import CLEAN_CODE, HEAD_FIRST_JAVA


AUTH = ("client", "client456")


def test_health_check(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "books": 3}


def test_get_book(client):
    response = client.get(f"/api/catalog/books/{HEAD_FIRST_JAVA}", auth=AUTH)
    assert response.status_code == 200
    book = response.json()["book"]
    assert book["title"] == "Head First Java"
    assert book["stock"] == 30


def test_get_book_miss_returns_null_book(client):
    response = client.get("/api/catalog/books/nonexistent-isbn", auth=AUTH)
    assert response.status_code == 200
    assert response.json() == {"book": None}


def test_search_books(client):
    response = client.get("/api/catalog/books", params={"keyword": "JAVA"}, auth=AUTH)
    assert response.status_code == 200
    assert [b["title"] for b in response.json()["books"]] == ["Effective Java", "Head First Java"]


def test_search_without_keyword_returns_all(client):
    response = client.get("/api/catalog/books", auth=AUTH)
    assert [b["isbn"] for b in response.json()["books"]][-1] == CLEAN_CODE
    assert len(response.json()["books"]) == 3


def test_missing_credentials(client):
    response = client.get("/api/catalog/books")
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Basic"


def test_wrong_credentials(client):
    response = client.get("/api/catalog/books", auth=("client", "nope"))
    assert response.status_code == 401


def test_auth_disabled(open_client):
    response = open_client.get(f"/api/catalog/books/{CLEAN_CODE}")
    assert response.status_code == 200
    assert response.json()["book"]["author"] == "Robert Martin"
