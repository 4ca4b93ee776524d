"""Tests for booking quote, creation, listing and status endpoints."""

import uuid

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _create_unit(client: AsyncClient, headers: dict, base_price: str = "50000") -> dict:
    response = await client.post("/api/v1/units", json={"name": "Room 7", "base_price": base_price}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def _book(
    client: AsyncClient,
    headers: dict,
    unit_id: str,
    check_in: str,
    check_out: str,
    **extra,
):
    return await client.post(
        "/api/v1/bookings",
        json={
            "unit_id": unit_id,
            "guest_id": str(uuid.uuid4()),
            "check_in": check_in,
            "check_out": check_out,
            **extra,
        },
        headers=headers,
    )


# ---------------------------------------------------------------------------
# POST /api/v1/bookings/quote
# ---------------------------------------------------------------------------


class TestQuote:
    async def test_base_price_quote(self, client: AsyncClient, tenant_headers: dict) -> None:
        unit = await _create_unit(client, tenant_headers)
        response = await client.post(
            "/api/v1/bookings/quote",
            json={"unit_id": unit["id"], "check_in": "2025-06-10", "check_out": "2025-06-13"},
            headers=tenant_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["nights"] == 3
        assert data["nightly_rate"] == "50000.00"
        assert data["total"] == "150000.00"
        assert data["promotion_label"] is None

    async def test_promotional_quote(self, client: AsyncClient, tenant_headers: dict) -> None:
        unit = await _create_unit(client, tenant_headers)
        await client.put(
            f"/api/v1/units/{unit['id']}/promotion",
            json={"kind": "PERCENT_OFF", "value": "10", "start_date": "2025-06-01", "end_date": "2025-06-30"},
            headers=tenant_headers,
        )
        response = await client.post(
            "/api/v1/bookings/quote",
            json={"unit_id": unit["id"], "check_in": "2025-06-10", "check_out": "2025-06-13"},
            headers=tenant_headers,
        )
        data = response.json()
        assert data["nightly_rate"] == "45000.00"
        assert data["total"] == "135000.00"
        assert data["promotion_label"] == "PERCENT_OFF"

    async def test_zero_nights(self, client: AsyncClient, tenant_headers: dict, test_unit: dict) -> None:
        response = await client.post(
            "/api/v1/bookings/quote",
            json={"unit_id": test_unit["id"], "check_in": "2025-06-10", "check_out": "2025-06-10"},
            headers=tenant_headers,
        )
        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "zero_nights"


# ---------------------------------------------------------------------------
# POST /api/v1/bookings
# ---------------------------------------------------------------------------


class TestCreateBooking:
    async def test_create_success(self, client: AsyncClient, tenant_headers: dict) -> None:
        unit = await _create_unit(client, tenant_headers)
        response = await _book(
            client,
            tenant_headers,
            unit["id"],
            "2025-06-10",
            "2025-06-13",
            guest_name="Amaka Eze",
            special_requests="Airport pickup",
        )
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "PENDING"
        assert data["nights"] == 3
        assert data["total_amount"] == "150000.00"
        assert data["computed_total"] == "150000.00"
        assert data["payment_status"] == "UNPAID"
        assert data["outstanding_amount"] == "150000.00"
        assert data["guest_name"] == "Amaka Eze"
        assert data["created_by"] == "receptionist:ada"

    async def test_total_override_keeps_computed(self, client: AsyncClient, tenant_headers: dict) -> None:
        unit = await _create_unit(client, tenant_headers)
        response = await _book(client, tenant_headers, unit["id"], "2025-06-10", "2025-06-13", total_amount="140,000")
        assert response.status_code == 201
        data = response.json()
        assert data["total_amount"] == "140000.00"
        assert data["computed_total"] == "150000.00"

    async def test_zero_override_rejected(self, client: AsyncClient, tenant_headers: dict, test_unit: dict) -> None:
        response = await _book(client, tenant_headers, test_unit["id"], "2025-06-10", "2025-06-13", total_amount="0")
        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "invalid_amount"

    async def test_overlap_conflict(self, client: AsyncClient, tenant_headers: dict, test_unit: dict) -> None:
        first = await _book(client, tenant_headers, test_unit["id"], "2025-06-10", "2025-06-13")
        assert first.status_code == 201

        response = await _book(client, tenant_headers, test_unit["id"], "2025-06-12", "2025-06-14")
        assert response.status_code == 409
        detail = response.json()["detail"]
        assert detail["code"] == "booking_conflict"
        assert detail["conflicting_booking_ids"] == [first.json()["id"]]

    async def test_back_to_back(self, client: AsyncClient, tenant_headers: dict, test_unit: dict) -> None:
        assert (await _book(client, tenant_headers, test_unit["id"], "2025-06-10", "2025-06-13")).status_code == 201
        assert (await _book(client, tenant_headers, test_unit["id"], "2025-06-13", "2025-06-15")).status_code == 201

    async def test_cancel_frees_the_nights(self, client: AsyncClient, tenant_headers: dict, test_unit: dict) -> None:
        first = (await _book(client, tenant_headers, test_unit["id"], "2025-06-10", "2025-06-13")).json()
        response = await client.post(f"/api/v1/bookings/{first['id']}/cancel", headers=tenant_headers)
        assert response.status_code == 200
        assert response.json()["status"] == "CANCELLED"
        assert response.json()["cancelled_at"] is not None

        again = await _book(client, tenant_headers, test_unit["id"], "2025-06-10", "2025-06-13")
        assert again.status_code == 201

    async def test_past_arrival(self, client: AsyncClient, tenant_headers: dict, test_unit: dict) -> None:
        response = await _book(client, tenant_headers, test_unit["id"], "2025-05-30", "2025-06-02")
        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "past_date"

    async def test_inverted_range(self, client: AsyncClient, tenant_headers: dict, test_unit: dict) -> None:
        response = await _book(client, tenant_headers, test_unit["id"], "2025-06-13", "2025-06-10")
        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "invalid_range"

    async def test_cannot_create_checked_in(self, client: AsyncClient, tenant_headers: dict, test_unit: dict) -> None:
        response = await _book(client, tenant_headers, test_unit["id"], "2025-06-10", "2025-06-13", status="CHECKED_IN")
        assert response.status_code == 409
        assert response.json()["detail"]["code"] == "invalid_transition"

    async def test_unit_of_another_tenant(self, client: AsyncClient, tenant_headers: dict, test_unit: dict) -> None:
        other = {"X-Tenant-ID": str(uuid.uuid4())}
        response = await _book(client, other, test_unit["id"], "2025-06-10", "2025-06-13")
        assert response.status_code == 404


# ---------------------------------------------------------------------------
# Status moves
# ---------------------------------------------------------------------------


class TestStatusMoves:
    async def test_confirm_then_check_in(self, client: AsyncClient, tenant_headers: dict, test_unit: dict) -> None:
        booking = (await _book(client, tenant_headers, test_unit["id"], "2025-06-01", "2025-06-03")).json()

        response = await client.post(f"/api/v1/bookings/{booking['id']}/confirm", headers=tenant_headers)
        assert response.status_code == 200
        assert response.json()["status"] == "CONFIRMED"

        response = await client.post(f"/api/v1/bookings/{booking['id']}/check-in", headers=tenant_headers)
        assert response.status_code == 200
        assert response.json()["status"] == "CHECKED_IN"
        assert response.json()["checked_in_at"] is not None

    async def test_pending_cannot_check_in(self, client: AsyncClient, tenant_headers: dict, test_unit: dict) -> None:
        booking = (await _book(client, tenant_headers, test_unit["id"], "2025-06-01", "2025-06-03")).json()
        response = await client.post(f"/api/v1/bookings/{booking['id']}/check-in", headers=tenant_headers)
        assert response.status_code == 409
        assert response.json()["detail"]["code"] == "invalid_transition"

        fetched = await client.get(f"/api/v1/bookings/{booking['id']}", headers=tenant_headers)
        assert fetched.json()["status"] == "PENDING"

    async def test_checked_in_cannot_be_cancelled(
        self, client: AsyncClient, tenant_headers: dict, in_house_booking: dict
    ) -> None:
        response = await client.post(f"/api/v1/bookings/{in_house_booking['id']}/cancel", headers=tenant_headers)
        assert response.status_code == 409

    async def test_missing_booking(self, client: AsyncClient, tenant_headers: dict) -> None:
        response = await client.post(f"/api/v1/bookings/{uuid.uuid4()}/confirm", headers=tenant_headers)
        assert response.status_code == 404
        assert response.json()["detail"]["message"] == "Booking not found"


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------


class TestListings:
    async def test_list_with_filters(
        self, client: AsyncClient, tenant_headers: dict, test_unit: dict, in_house_booking: dict
    ) -> None:
        await _book(client, tenant_headers, test_unit["id"], "2025-06-10", "2025-06-12")

        response = await client.get("/api/v1/bookings", headers=tenant_headers)
        assert response.status_code == 200
        assert response.json()["total"] == 2

        response = await client.get("/api/v1/bookings", params={"status": "CHECKED_IN"}, headers=tenant_headers)
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["id"] == in_house_booking["id"]

        response = await client.get("/api/v1/bookings", params={"payment_status": "PAID"}, headers=tenant_headers)
        assert response.json() == {"items": [], "total": 0}

        response = await client.get("/api/v1/bookings", params={"unit_id": str(uuid.uuid4())}, headers=tenant_headers)
        assert response.json()["total"] == 0

    async def test_in_house(self, client: AsyncClient, tenant_headers: dict, in_house_booking: dict) -> None:
        response = await client.get("/api/v1/bookings/in-house", headers=tenant_headers)
        assert response.status_code == 200
        assert [b["id"] for b in response.json()] == [in_house_booking["id"]]

    async def test_arrivals_today(self, client: AsyncClient, tenant_headers: dict, test_unit: dict) -> None:
        today = (await _book(client, tenant_headers, test_unit["id"], "2025-06-01", "2025-06-02")).json()
        await _book(client, tenant_headers, test_unit["id"], "2025-06-02", "2025-06-04")

        response = await client.get("/api/v1/bookings/arrivals/today", headers=tenant_headers)
        assert response.status_code == 200
        assert [b["id"] for b in response.json()] == [today["id"]]

    async def test_arrivals_this_week(self, client: AsyncClient, tenant_headers: dict, test_unit: dict) -> None:
        today = (await _book(client, tenant_headers, test_unit["id"], "2025-06-01", "2025-06-02")).json()
        sixth_day = (await _book(client, tenant_headers, test_unit["id"], "2025-06-07", "2025-06-08")).json()
        await _book(client, tenant_headers, test_unit["id"], "2025-06-08", "2025-06-09")
        cancelled = (await _book(client, tenant_headers, test_unit["id"], "2025-06-03", "2025-06-05")).json()
        await client.post(f"/api/v1/bookings/{cancelled['id']}/cancel", headers=tenant_headers)

        response = await client.get("/api/v1/bookings/arrivals/week", headers=tenant_headers)
        assert response.status_code == 200
        assert [b["id"] for b in response.json()] == [today["id"], sixth_day["id"]]

    async def test_several_payment_statuses(
        self, client: AsyncClient, tenant_headers: dict, test_unit: dict, in_house_booking: dict
    ) -> None:
        await client.post(
            f"/api/v1/bookings/{in_house_booking['id']}/payments",
            json={"amount": "40000", "reference": "POS-1"},
            headers=tenant_headers,
        )
        unpaid = (await _book(client, tenant_headers, test_unit["id"], "2025-06-10", "2025-06-12")).json()
        paid = (await _book(client, tenant_headers, test_unit["id"], "2025-06-20", "2025-06-21")).json()
        await client.post(
            f"/api/v1/bookings/{paid['id']}/payments",
            json={"amount": "25000", "reference": "POS-2"},
            headers=tenant_headers,
        )

        response = await client.get(
            "/api/v1/bookings", params={"payment_status": ["UNPAID", "PARTPAID"]}, headers=tenant_headers
        )
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert {b["id"] for b in data["items"]} == {in_house_booking["id"], unpaid["id"]}

        response = await client.get("/api/v1/bookings", params={"payment_status": "PAID"}, headers=tenant_headers)
        assert [b["id"] for b in response.json()["items"]] == [paid["id"]]
