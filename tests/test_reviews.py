"""
Tests for Reviews

Tests the review system:
- Create a review (authenticated, one per user per book)
- Update a review (owner only)
- Delete a review (owner only)
- Aggregate ratings follow every write

Business Rules:
- One review per user per book, enforced by a database constraint
- Only the review author can update or delete
"""

import uuid

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from app.models import Book
from app.models.review import Review
from app.models.user import User
from app.services import reviews as review_service

VALID_COMMENT = "An unsettling and brilliant novel."


def book_rating(client: TestClient, book_id: str) -> tuple[float, int]:
    book = client.get(f"/api/books/{book_id}").json()["data"]["book"]
    return book["averageRating"], book["reviewCount"]


# =============================================================================
# Create Review
# =============================================================================


class TestCreateReview:
    """Tests for POST /api/books/{book_id}/reviews"""

    def test_create_review_success(
        self, client: TestClient, sample_book: Book, second_user: User, auth_header
    ):
        response = client.post(
            f"/api/books/{sample_book.id}/reviews",
            json={"rating": 5, "comment": VALID_COMMENT},
            headers=auth_header(second_user),
        )

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["message"] == "Review added successfully"
        review = body["data"]
        assert review["rating"] == 5
        assert review["comment"] == VALID_COMMENT
        assert review["user"] == {"id": second_user.id, "username": "seconduser"}
        assert review["book"] == {
            "id": sample_book.id,
            "title": "1984",
            "author": "George Orwell",
        }

    def test_create_review_updates_book_rating(
        self, client: TestClient, sample_book: Book, second_user: User, auth_header
    ):
        client.post(
            f"/api/books/{sample_book.id}/reviews",
            json={"rating": 3, "comment": VALID_COMMENT},
            headers=auth_header(second_user),
        )

        assert book_rating(client, sample_book.id) == (3.0, 1)

    def test_create_review_requires_auth(self, client: TestClient, sample_book: Book):
        response = client.post(
            f"/api/books/{sample_book.id}/reviews",
            json={"rating": 5, "comment": VALID_COMMENT},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_create_duplicate_review(
        self,
        client: TestClient,
        sample_review: Review,
        sample_user: User,
        auth_header,
    ):
        book_id = sample_review.book_id

        response = client.post(
            f"/api/books/{book_id}/reviews",
            json={"rating": 1, "comment": "Changed my mind about it."},
            headers=auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        errors = response.json()["errors"]
        assert errors[0]["field"] == "duplicate_review"
        assert book_rating(client, book_id) == (4.0, 1)

    def test_duplicate_review_caught_by_constraint(
        self,
        client: TestClient,
        sample_review: Review,
        sample_user: User,
        auth_header,
        monkeypatch: pytest.MonkeyPatch,
    ):
        """A request that passes the read check still cannot insert a second review."""
        book_id = sample_review.book_id
        original = review_service.find_existing_review
        calls = []

        def stale_first_read(db, user_id, book_id):
            calls.append(book_id)
            if len(calls) == 1:
                return None
            return original(db, user_id, book_id)

        monkeypatch.setattr(review_service, "find_existing_review", stale_first_read)

        response = client.post(
            f"/api/books/{book_id}/reviews",
            json={"rating": 2, "comment": "Racing the other request."},
            headers=auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"][0]["field"] == "duplicate_review"
        assert len(calls) == 2
        assert book_rating(client, book_id) == (4.0, 1)

    def test_create_review_book_not_found(
        self, client: TestClient, sample_user: User, auth_header
    ):
        response = client.post(
            f"/api/books/{uuid.uuid4()}/reviews",
            json={"rating": 5, "comment": VALID_COMMENT},
            headers=auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "Book not found"

    def test_create_review_malformed_book_id(
        self, client: TestClient, sample_user: User, auth_header
    ):
        response = client.post(
            "/api/books/12345/reviews",
            json={"rating": 5, "comment": VALID_COMMENT},
            headers=auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Invalid book ID format"

    @pytest.mark.parametrize("rating", [0, 6, 3.5, "five"])
    def test_create_review_invalid_rating(
        self, client: TestClient, sample_book: Book, sample_user: User, auth_header, rating
    ):
        response = client.post(
            f"/api/books/{sample_book.id}/reviews",
            json={"rating": rating, "comment": VALID_COMMENT},
            headers=auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"][0]["field"] == "rating"

    def test_create_review_comment_too_short(
        self, client: TestClient, sample_book: Book, sample_user: User, auth_header
    ):
        """Whitespace does not count towards the minimum length."""
        response = client.post(
            f"/api/books/{sample_book.id}/reviews",
            json={"rating": 4, "comment": "   too short   "},
            headers=auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"][0]["field"] == "comment"


# =============================================================================
# Update Review
# =============================================================================


class TestUpdateReview:
    """Tests for PUT /api/reviews/{review_id}"""

    def test_update_review_success(
        self, client: TestClient, sample_review: Review, sample_user: User, auth_header
    ):
        review_id, book_id = sample_review.id, sample_review.book_id

        response = client.put(
            f"/api/reviews/{review_id}",
            json={"rating": 2, "comment": "Less impressive on a reread."},
            headers=auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["message"] == "Review updated successfully"
        assert body["data"]["rating"] == 2
        assert body["data"]["comment"] == "Less impressive on a reread."
        assert body["data"]["book"]["title"] == "1984"
        assert book_rating(client, book_id) == (2.0, 1)

    def test_update_review_partial(
        self, client: TestClient, sample_review: Review, sample_user: User, auth_header
    ):
        response = client.put(
            f"/api/reviews/{sample_review.id}",
            json={"comment": "Only the comment changes here."},
            headers=auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["rating"] == 4
        assert data["comment"] == "Only the comment changes here."

    def test_update_review_empty_patch(
        self, client: TestClient, sample_review: Review, sample_user: User, auth_header
    ):
        response = client.put(
            f"/api/reviews/{sample_review.id}",
            json={},
            headers=auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"] == [
            {"field": "empty_patch", "message": "Please provide rating or comment to update"}
        ]

    def test_update_review_not_owner(
        self, client: TestClient, sample_review: Review, second_user: User, auth_header
    ):
        review_id, book_id = sample_review.id, sample_review.book_id
        comment = sample_review.comment

        response = client.put(
            f"/api/reviews/{review_id}",
            json={"rating": 1},
            headers=auth_header(second_user),
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["message"] == "You can only update your own reviews"

        review = client.get(f"/api/books/{book_id}").json()["data"]["reviews"]["data"][0]
        assert review["id"] == review_id
        assert review["rating"] == 4
        assert review["comment"] == comment
        assert book_rating(client, book_id) == (4.0, 1)

    def test_update_review_not_found(self, client: TestClient, sample_user: User, auth_header):
        response = client.put(
            f"/api/reviews/{uuid.uuid4()}",
            json={"rating": 3},
            headers=auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "Review not found"

    def test_update_review_malformed_id(self, client: TestClient, sample_user: User, auth_header):
        response = client.put(
            "/api/reviews/abc",
            json={"rating": 3},
            headers=auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Invalid review ID format"

    def test_update_review_invalid_rating(
        self, client: TestClient, sample_review: Review, sample_user: User, auth_header
    ):
        response = client.put(
            f"/api/reviews/{sample_review.id}",
            json={"rating": 9},
            headers=auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"][0]["field"] == "rating"

    def test_update_review_requires_auth(self, client: TestClient, sample_review: Review):
        response = client.put(f"/api/reviews/{sample_review.id}", json={"rating": 1})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Delete Review
# =============================================================================


class TestDeleteReview:
    """Tests for DELETE /api/reviews/{review_id}"""

    def test_delete_review_success(
        self, client: TestClient, sample_review: Review, sample_user: User, auth_header
    ):
        review_id, book_id = sample_review.id, sample_review.book_id

        response = client.delete(f"/api/reviews/{review_id}", headers=auth_header(sample_user))

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "success": True,
            "message": "Review deleted successfully",
        }
        assert book_rating(client, book_id) == (0, 0)

        again = client.delete(f"/api/reviews/{review_id}", headers=auth_header(sample_user))
        assert again.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_review_allows_new_review(
        self, client: TestClient, sample_review: Review, sample_user: User, auth_header
    ):
        review_id, book_id = sample_review.id, sample_review.book_id
        headers = auth_header(sample_user)

        client.delete(f"/api/reviews/{review_id}", headers=headers)
        response = client.post(
            f"/api/books/{book_id}/reviews",
            json={"rating": 5, "comment": VALID_COMMENT},
            headers=headers,
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert book_rating(client, book_id) == (5.0, 1)

    def test_delete_review_not_owner(
        self, client: TestClient, sample_review: Review, second_user: User, auth_header
    ):
        review_id, book_id = sample_review.id, sample_review.book_id

        response = client.delete(f"/api/reviews/{review_id}", headers=auth_header(second_user))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["message"] == "You can only delete your own reviews"
        assert book_rating(client, book_id) == (4.0, 1)

    def test_delete_review_not_found(self, client: TestClient, sample_user: User, auth_header):
        response = client.delete(f"/api/reviews/{uuid.uuid4()}", headers=auth_header(sample_user))

        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# Ratings Across Writes
# =============================================================================


def test_rating_follows_add_update_delete(
    client: TestClient, sample_book: Book, user_factory, auth_header
):
    book_id = sample_book.id
    alice, bob = user_factory("alice"), user_factory("bob")

    created = client.post(
        f"/api/books/{book_id}/reviews",
        json={"rating": 5, "comment": VALID_COMMENT},
        headers=auth_header(alice),
    ).json()["data"]
    client.post(
        f"/api/books/{book_id}/reviews",
        json={"rating": 2, "comment": VALID_COMMENT},
        headers=auth_header(bob),
    )
    assert book_rating(client, book_id) == (3.5, 2)

    client.put(f"/api/reviews/{created['id']}", json={"rating": 4}, headers=auth_header(alice))
    assert book_rating(client, book_id) == (3.0, 2)

    client.delete(f"/api/reviews/{created['id']}", headers=auth_header(alice))
    assert book_rating(client, book_id) == (2.0, 1)
