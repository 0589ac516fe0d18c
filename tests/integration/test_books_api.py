"""End-to-end tests for the /books routes."""

from typing import Any

from fastapi.testclient import TestClient


class TestListBooks:
    def test_lists_stored_books(self, client: TestClient, stored_book: dict[str, Any]):
        response = client.get("/books")

        assert response.status_code == 200
        books = response.json()["books"]
        assert len(books) == 1
        assert books[0]["isbn"] == stored_book["isbn"]

    def test_empty_catalogue(self, client: TestClient):
        response = client.get("/books")

        assert response.status_code == 200
        assert response.json() == {"books": []}

    def test_lists_every_inserted_book(self, client: TestClient, book_payload_factory):
        for n in range(5):
            response = client.post(
                "/books", json=book_payload_factory(isbn=f"isbn-{n}", title=f"Book {n}")
            )
            assert response.status_code == 201

        books = client.get("/books").json()["books"]

        assert len(books) == 5
        assert all("isbn" in book for book in books)
        assert {book["isbn"] for book in books} == {f"isbn-{n}" for n in range(5)}


class TestGetBook:
    def test_gets_one_book(self, client: TestClient, stored_book: dict[str, Any]):
        response = client.get(f"/books/{stored_book['isbn']}")

        assert response.status_code == 200
        assert response.json() == {"book": stored_book}

    def test_404_if_book_is_not_found(self, client: TestClient):
        response = client.get("/books/0")

        assert response.status_code == 404
        assert response.json()["error"]["status"] == 404


class TestCreateBook:
    def test_submits_a_new_book(self, client: TestClient, book_payload: dict[str, Any]):
        response = client.post("/books", json=book_payload)

        assert response.status_code == 201
        assert response.json() == {"book": book_payload}

        fetched = client.get(f"/books/{book_payload['isbn']}")
        assert fetched.status_code == 200
        assert fetched.json()["book"] == book_payload

    def test_stops_submission_without_required_items(self, client: TestClient):
        response = client.post("/books", json={"pages": 4})

        assert response.status_code == 400
        body = response.json()
        assert body["error"]["status"] == 400
        assert isinstance(body["error"]["message"], list)
        assert "isbn: Field required" in body["error"]["message"]

        assert client.get("/books").json()["books"] == []

    def test_rejects_unknown_fields(self, client: TestClient, book_payload):
        response = client.post("/books", json={**book_payload, "broken": "Test"})

        assert response.status_code == 400
        assert client.get(f"/books/{book_payload['isbn']}").status_code == 404

    def test_rejects_wrong_types(self, client: TestClient, book_payload):
        response = client.post("/books", json={**book_payload, "pages": "many"})

        assert response.status_code == 400
        assert response.json()["error"]["message"][0].startswith("pages: ")

    def test_duplicate_isbn_is_rejected(
        self, client: TestClient, stored_book: dict[str, Any], book_payload_factory
    ):
        response = client.post("/books", json=book_payload_factory(title="Imposter"))

        assert response.status_code == 400
        assert stored_book["isbn"] in response.json()["error"]["message"]

        fetched = client.get(f"/books/{stored_book['isbn']}").json()["book"]
        assert fetched["title"] == stored_book["title"]

    def test_rejects_integers_the_store_cannot_hold(
        self, client: TestClient, book_payload
    ):
        response = client.post("/books", json={**book_payload, "pages": 2**70})

        assert response.status_code == 400
        assert response.json()["error"]["message"][0].startswith("pages: ")
        assert client.get(f"/books/{book_payload['isbn']}").status_code == 404

    def test_rejects_empty_isbn(self, client: TestClient, book_payload):
        response = client.post("/books", json={**book_payload, "isbn": ""})

        assert response.status_code == 400
        assert response.json()["error"]["message"][0].startswith("isbn: ")
        assert client.get("/books").json()["books"] == []

    def test_rejects_missing_body(self, client: TestClient):
        response = client.post("/books")

        assert response.status_code == 400
        assert response.json()["error"]["message"] == [
            "Request body must be a JSON object"
        ]

    def test_rejects_malformed_json(self, client: TestClient):
        response = client.post(
            "/books",
            content=b'{"isbn": ',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"]["status"] == 400


class TestUpdateBook:
    def test_updates_book_info(self, client: TestClient, stored_book: dict[str, Any]):
        response = client.put(
            f"/books/{stored_book['isbn']}",
            json={
                "amazon_url": "https://google.com",
                "author": "Test",
                "language": "Test",
                "pages": 1234,
                "publisher": "Test",
                "title": "Update Test",
                "year": 6,
            },
        )

        assert response.status_code == 200
        book = response.json()["book"]
        assert book["isbn"] == stored_book["isbn"]
        assert book["year"] == 6
        assert book["title"] == "Update Test"

    def test_partial_update_keeps_other_fields(
        self, client: TestClient, stored_book: dict[str, Any]
    ):
        response = client.put(f"/books/{stored_book['isbn']}", json={"pages": 300})

        assert response.status_code == 200
        assert response.json()["book"] == {**stored_book, "pages": 300}

    def test_does_not_allow_non_listed_data(
        self, client: TestClient, stored_book: dict[str, Any]
    ):
        response = client.put(
            f"/books/{stored_book['isbn']}",
            json={"amazon_url": "https://google.com", "broken": "Test", "year": 6},
        )

        assert response.status_code == 400
        assert response.json()["error"]["message"] == ["broken: Field is not allowed"]

        unchanged = client.get(f"/books/{stored_book['isbn']}").json()["book"]
        assert unchanged == stored_book

    def test_rejects_oversized_year(
        self, client: TestClient, stored_book: dict[str, Any]
    ):
        url = f"/books/{stored_book['isbn']}"
        response = client.put(url, json={"year": 2**64})

        assert response.status_code == 400
        assert response.json()["error"]["message"][0].startswith("year: ")
        assert client.get(url).json()["book"] == stored_book

    def test_isbn_cannot_be_changed(
        self, client: TestClient, stored_book: dict[str, Any]
    ):
        response = client.put(f"/books/{stored_book['isbn']}", json={"isbn": "new"})

        assert response.status_code == 400
        assert client.get("/books/new").status_code == 404

    def test_404_if_book_is_not_found(self, client: TestClient):
        response = client.put("/books/0", json={"title": "Update Test", "year": 6})

        assert response.status_code == 404

    def test_404_takes_precedence_over_invalid_payload(self, client: TestClient):
        response = client.put("/books/0", json={"broken": "Test"})

        assert response.status_code == 404


class TestDeleteBook:
    def test_deletes_book_by_isbn(self, client: TestClient, stored_book: dict[str, Any]):
        response = client.delete(f"/books/{stored_book['isbn']}")

        assert response.status_code == 200
        assert response.json() == {"message": "Book deleted"}
        assert client.get(f"/books/{stored_book['isbn']}").status_code == 404

    def test_404_if_book_is_not_found(self, client: TestClient):
        response = client.delete("/books/0")

        assert response.status_code == 404
        assert "0" in response.json()["error"]["message"]
