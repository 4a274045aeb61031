"""Tests for /api/v1/reviews."""

from uuid import uuid4

import pytest

from helpers import booking_payload

BASE = "/api/v1/reviews"

REVIEW = {"rating": 5, "title": "Wonderful", "content": "Smooth visit and great results."}


@pytest.fixture
def booking_with_status(user_client, ops_client, clinic):
    """Create a booking as the logged-in user and move it to ``status``."""

    async def create(status: str = "confirmed") -> dict:
        created = (await user_client.post("/api/v1/booking-requests/", json=booking_payload(clinic))).json()
        if status != "received":
            response = await ops_client.post(
                f"/api/v1/ops/booking-requests/{created['id']}/status", json={"status": status}
            )
            assert response.status_code == 200
        return created

    return create


class TestCreateReview:
    """Tests for POST /reviews/."""

    async def test_create(self, user_client, booking_with_status, clinic):
        booking = await booking_with_status()

        response = await user_client.post(f"{BASE}/", json={"booking_id": booking["id"], **REVIEW})
        assert response.status_code == 201
        assert response.json()["message"] == "Review submitted successfully"

        reviews = await user_client.get(f"{BASE}/clinic/{clinic.id}")
        data = reviews.json()
        assert data["total"] == 1
        assert data["items"][0]["user_name"] == "Test User"
        assert data["stats"]["average_rating"] == 5.0

    async def test_anonymous_is_401(self, client, booking_with_status):
        booking = await booking_with_status()
        response = await client.post(f"{BASE}/", json={"booking_id": booking["id"], **REVIEW})
        assert response.status_code == 401

    async def test_unconfirmed_is_400(self, user_client, booking_with_status):
        booking = await booking_with_status("proposedOptions")
        response = await user_client.post(f"{BASE}/", json={"booking_id": booking["id"], **REVIEW})
        assert response.status_code == 400

    async def test_not_owner_is_403(self, make_client, booking_with_status, user_factory, session_token_factory, settings):
        booking = await booking_with_status()
        stranger = await user_factory(email="stranger@example.com")
        token = await session_token_factory(stranger)

        async with make_client(**{settings.session_cookie_name: token}) as stranger_client:
            response = await stranger_client.post(f"{BASE}/", json={"booking_id": booking["id"], **REVIEW})
        assert response.status_code == 403

    async def test_duplicate_is_409(self, user_client, booking_with_status):
        booking = await booking_with_status()
        await user_client.post(f"{BASE}/", json={"booking_id": booking["id"], **REVIEW})
        response = await user_client.post(f"{BASE}/", json={"booking_id": booking["id"], **REVIEW})
        assert response.status_code == 409

    async def test_missing_booking_is_404(self, user_client):
        response = await user_client.post(f"{BASE}/", json={"booking_id": str(uuid4()), **REVIEW})
        assert response.status_code == 404

    async def test_short_content_is_400(self, user_client, booking_with_status):
        booking = await booking_with_status()
        response = await user_client.post(
            f"{BASE}/", json={"booking_id": booking["id"], **REVIEW, "content": "Too short"}
        )
        assert response.status_code == 400


class TestReviewQueries:
    async def test_can_review(self, client, user_client, booking_with_status):
        booking = await booking_with_status("contactingHospital")
        anonymous = await client.get(f"{BASE}/can-review/{booking['id']}")
        assert anonymous.json() == {"can_review": False, "reason": "login required"}

        owner = await user_client.get(f"{BASE}/can-review/{booking['id']}")
        assert owner.json() == {"can_review": False, "reason": "booking must be confirmed"}

        missing = await user_client.get(f"{BASE}/can-review/{uuid4()}")
        assert missing.json() == {"can_review": False, "reason": "booking not found"}

    async def test_can_review_anonymous_unknown_booking(self, client):
        response = await client.get(f"{BASE}/can-review/{uuid4()}")
        assert response.status_code == 200
        assert response.json() == {"can_review": False, "reason": "login required"}

    async def test_my_reviews_and_helpful(self, client, user_client, booking_with_status):
        booking = await booking_with_status()
        await user_client.post(f"{BASE}/", json={"booking_id": booking["id"], **REVIEW})

        mine = await user_client.get(f"{BASE}/my-reviews")
        assert mine.status_code == 200
        review = mine.json()[0]
        assert review["clinic_name"]["en"] == "Gangnam Glow Clinic"

        helpful = await client.post(f"{BASE}/{review['id']}/helpful")
        assert helpful.json() == {"helpful_count": 1}

    async def test_my_reviews_requires_login(self, client):
        assert (await client.get(f"{BASE}/my-reviews")).status_code == 401

    async def test_helpful_missing_review(self, client):
        assert (await client.post(f"{BASE}/{uuid4()}/helpful")).status_code == 404

    async def test_unknown_clinic(self, client):
        assert (await client.get(f"{BASE}/clinic/{uuid4()}")).status_code == 404
