"""Tests for the error envelope, request logging middleware and security headers."""

from fastapi.testclient import TestClient

from src.bookstore.entities.service.book import BookRepository


class TestErrorEnvelope:
    def test_unknown_route_uses_envelope(self, client: TestClient):
        response = client.get("/shelves")

        assert response.status_code == 404
        assert response.json() == {"error": {"message": "Not Found", "status": 404}}

    def test_unsupported_method_uses_envelope(self, client: TestClient):
        response = client.patch("/books/0691161518", json={"pages": 1})

        assert response.status_code == 405
        assert response.json()["error"]["status"] == 405

    def test_unexpected_failure_returns_500(self, client: TestClient, monkeypatch):
        def explode(self):
            raise RuntimeError("database went away")

        monkeypatch.setattr(BookRepository, "list_all", explode)

        response = client.get("/books", headers={"X-Request-ID": "req-500"})

        assert response.status_code == 500
        assert response.json() == {
            "error": {"message": "Internal Server Error", "status": 500}
        }
        assert response.headers["X-Request-ID"] == "req-500"

    def test_internal_details_are_not_leaked(self, client: TestClient, monkeypatch):
        def explode(self, isbn):
            raise RuntimeError("secret connection string")

        monkeypatch.setattr(BookRepository, "get_by_isbn", explode)

        response = client.get("/books/0691161518")

        assert response.status_code == 500
        assert "secret" not in response.text


class TestRequestMiddleware:
    def test_request_id_is_echoed(self, client: TestClient):
        response = client.get("/health", headers={"X-Request-ID": "abc-123"})

        assert response.headers["X-Request-ID"] == "abc-123"

    def test_request_id_is_generated(self, client: TestClient):
        response = client.get("/health")

        assert response.headers["X-Request-ID"]

    def test_security_headers(self, client: TestClient):
        response = client.get("/books")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"
        # Development config
        assert "Strict-Transport-Security" not in response.headers

    def test_error_responses_carry_security_headers(self, client: TestClient):
        response = client.get("/books/missing")

        assert response.status_code == 404
        assert response.headers["X-Content-Type-Options"] == "nosniff"
