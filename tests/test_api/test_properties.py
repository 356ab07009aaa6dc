"""Tests for property endpoints: search, host CRUD, ownership and approval."""

import uuid
from decimal import Decimal

from httpx import AsyncClient
from sqlalchemy import select

from staylocal.models.notification import Notification
from staylocal.models.property import Property
from staylocal.models.user import User


def _listing(**overrides) -> dict:
    body = {
        "title": "Harbour View Apartment",
        "description": "Two rooms above the harbour.",
        "property_type": "apartment",
        "city": "Astoria",
        "country": "USA",
        "price_per_night": "120.00",
        "max_guests": 3,
        "bedrooms": 2,
        "amenities": ["wifi", "kitchen"],
        "images": [{"url": "https://img.test/harbour.jpg", "caption": "Living room"}],
    }
    body.update(overrides)
    return body


# ---------------------------------------------------------------------------
# Public search
# ---------------------------------------------------------------------------


class TestSearch:
    """GET /api/v1/properties."""

    async def test_only_approved_and_available(self, client: AsyncClient, host: User, make_property):
        visible = await make_property(host, title="Visible")
        await make_property(host, title="Unapproved", is_approved=False)
        await make_property(host, title="Closed", is_available=False)

        response = await client.get("/api/v1/properties")
        assert response.status_code == 200
        data = response.json()
        assert [p["id"] for p in data["items"]] == [str(visible.id)]
        assert data["total"] == 1
        assert data["items"][0]["host"]["name"] == host.name

    async def test_filters(self, client: AsyncClient, host: User, make_property):
        cabin = await make_property(
            host, title="Pine Cabin", city="Bend", price_per_night=Decimal("90"), max_guests=4, bedrooms=2
        )
        await make_property(
            host,
            title="City Room",
            property_type="room",
            city="Portland",
            price_per_night=Decimal("60"),
            max_guests=1,
            amenities=["wifi"],
        )

        async def ids(**params) -> list[str]:
            response = await client.get("/api/v1/properties", params=params)
            assert response.status_code == 200
            return [p["id"] for p in response.json()["items"]]

        assert await ids(city="bend") == [str(cabin.id)]
        assert await ids(type="cabin") == [str(cabin.id)]
        assert await ids(search="pine") == [str(cabin.id)]
        assert await ids(min_price="80") == [str(cabin.id)]
        assert await ids(max_price="80") != [str(cabin.id)]
        assert await ids(guests=3) == [str(cabin.id)]
        assert await ids(bedrooms=2) == [str(cabin.id)]
        assert await ids(amenities="wifi,parking") == [str(cabin.id)]
        assert len(await ids(amenities="wifi,not-an-amenity")) == 2

    async def test_sort_by_price(self, client: AsyncClient, host: User, make_property):
        await make_property(host, title="Mid", price_per_night=Decimal("100"))
        await make_property(host, title="Cheap", price_per_night=Decimal("40"))
        await make_property(host, title="Dear", price_per_night=Decimal("300"))

        response = await client.get("/api/v1/properties", params={"sort": "price_asc"})
        assert [p["title"] for p in response.json()["items"]] == ["Cheap", "Mid", "Dear"]

        response = await client.get("/api/v1/properties", params={"sort": "price_desc"})
        assert [p["title"] for p in response.json()["items"]] == ["Dear", "Mid", "Cheap"]

    async def test_pagination(self, client: AsyncClient, host: User, make_property):
        for i in range(5):
            await make_property(host, title=f"Listing {i}")

        response = await client.get("/api/v1/properties", params={"page": 2, "limit": 2})
        data = response.json()
        assert data["total"] == 5
        assert data["page"] == 2
        assert data["pages"] == 3
        assert len(data["items"]) == 2

    async def test_get_by_id(self, client: AsyncClient, listed_property: Property):
        response = await client.get(f"/api/v1/properties/{listed_property.id}")
        assert response.status_code == 200
        data = response.json()
        assert data["title"] == listed_property.title
        assert data["rating_average"] == 0.0
        assert data["house_rules"]["check_in"] == "15:00"

    async def test_get_unknown(self, client: AsyncClient):
        response = await client.get(f"/api/v1/properties/{uuid.uuid4()}")
        assert response.status_code == 404


# ---------------------------------------------------------------------------
# Host CRUD
# ---------------------------------------------------------------------------


class TestCreateProperty:
    async def test_host_listing_awaits_approval(self, client: AsyncClient, host: User, host_headers: dict):
        response = await client.post("/api/v1/properties", json=_listing(), headers=host_headers)
        assert response.status_code == 201
        data = response.json()
        assert data["host_id"] == str(host.id)
        assert data["is_approved"] is False
        assert data["rating_count"] == 0
        assert Decimal(data["price_per_night"]) == Decimal("120")

        public = await client.get("/api/v1/properties")
        assert public.json()["total"] == 0

    async def test_admin_listing_is_approved(self, client: AsyncClient, admin_headers: dict):
        response = await client.post("/api/v1/properties", json=_listing(), headers=admin_headers)
        assert response.status_code == 201
        assert response.json()["is_approved"] is True

    async def test_traveler_forbidden(self, client: AsyncClient, traveler_headers: dict):
        response = await client.post("/api/v1/properties", json=_listing(), headers=traveler_headers)
        assert response.status_code == 403

    async def test_invalid_body(self, client: AsyncClient, host_headers: dict):
        response = await client.post(
            "/api/v1/properties",
            json=_listing(max_guests=0, amenities=["helipad"]),
            headers=host_headers,
        )
        assert response.status_code == 422

    async def test_my_properties(self, client: AsyncClient, host_headers: dict, other_host: User, make_property):
        await client.post("/api/v1/properties", json=_listing(), headers=host_headers)
        await make_property(other_host)

        response = await client.get("/api/v1/properties/host/mine", headers=host_headers)
        assert response.status_code == 200
        assert response.json()["total"] == 1


class TestUpdateDeleteProperty:
    async def test_owner_updates(self, client: AsyncClient, host_headers: dict, listed_property: Property):
        response = await client.put(
            f"/api/v1/properties/{listed_property.id}",
            json={"title": "Renamed Cabin", "price_per_night": "110.00"},
            headers=host_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Renamed Cabin"
        assert Decimal(data["price_per_night"]) == Decimal("110")
        assert data["city"] == listed_property.city

    async def test_rating_cannot_be_set_directly(
        self, client: AsyncClient, host_headers: dict, listed_property: Property
    ):
        response = await client.put(
            f"/api/v1/properties/{listed_property.id}",
            json={"rating_average": 5.0, "rating_count": 99, "is_approved": False},
            headers=host_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["rating_average"] == 0.0
        assert data["rating_count"] == 0
        assert data["is_approved"] is True

    async def test_other_host_cannot_update(
        self, client: AsyncClient, other_host_headers: dict, listed_property: Property
    ):
        response = await client.put(
            f"/api/v1/properties/{listed_property.id}",
            json={"title": "Hijacked"},
            headers=other_host_headers,
        )
        assert response.status_code == 403
        assert response.json()["detail"] == "Not authorized to update this property"

    async def test_admin_can_update_any(self, client: AsyncClient, admin_headers: dict, listed_property: Property):
        response = await client.put(
            f"/api/v1/properties/{listed_property.id}", json={"is_available": False}, headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["is_available"] is False

    async def test_other_host_cannot_delete(
        self, client: AsyncClient, other_host_headers: dict, listed_property: Property
    ):
        response = await client.delete(f"/api/v1/properties/{listed_property.id}", headers=other_host_headers)
        assert response.status_code == 403
        assert response.json()["detail"] == "Not authorized to delete this property"

    async def test_owner_deletes(self, client: AsyncClient, host_headers: dict, listed_property: Property):
        response = await client.delete(f"/api/v1/properties/{listed_property.id}", headers=host_headers)
        assert response.status_code == 200

        missing = await client.get(f"/api/v1/properties/{listed_property.id}")
        assert missing.status_code == 404


# ---------------------------------------------------------------------------
# Admin approval
# ---------------------------------------------------------------------------


class TestApproval:
    async def test_pending_queue_and_approve(
        self, client: AsyncClient, db_session, host: User, admin_headers: dict, make_property
    ):
        pending = await make_property(host, title="New Listing", is_approved=False)

        queue = await client.get("/api/v1/properties/admin/pending", headers=admin_headers)
        assert [p["id"] for p in queue.json()["items"]] == [str(pending.id)]

        response = await client.put(f"/api/v1/properties/{pending.id}/approve", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["is_approved"] is True

        result = await db_session.execute(select(Notification).where(Notification.recipient_id == host.id))
        assert [n.type for n in result.scalars().all()] == ["property_approved"]

    async def test_host_cannot_approve(self, client: AsyncClient, host: User, host_headers: dict, make_property):
        pending = await make_property(host, is_approved=False)
        response = await client.put(f"/api/v1/properties/{pending.id}/approve", headers=host_headers)
        assert response.status_code == 403
