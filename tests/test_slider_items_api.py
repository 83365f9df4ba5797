"""Tests for the homepage slider endpoints."""

from uuid import uuid4

from techpinik.models import SliderItem


def slide(**overrides) -> SliderItem:
    values = {
        "id": uuid4(),
        "title": "Eid Sale",
        "image_url": "https://cdn.example.com/eid.jpg",
        "sort_order": 0,
    }
    values.update(overrides)
    return SliderItem(**values)


class TestListSliderItems:
    """Tests for GET /api/slider-items."""

    def test_display_order(self, client, db):
        db.add(
            slide(title="Second", sort_order=1),
            slide(title="First", sort_order=0),
            slide(title="Hidden", sort_order=2, is_active=False),
        )

        all_items = client.get("/api/slider-items").json()["data"]
        active = client.get("/api/slider-items?is_active=true").json()["data"]

        assert [s["title"] for s in all_items] == ["First", "Second", "Hidden"]
        assert [s["title"] for s in active] == ["First", "Second"]

    def test_sort_descending(self, client, db):
        db.add(slide(title="A", sort_order=0), slide(title="B", sort_order=5))

        data = client.get("/api/slider-items?sort_order=desc").json()["data"]

        assert [s["title"] for s in data] == ["B", "A"]


class TestCreateSliderItem:
    """Tests for POST /api/slider-items."""

    def test_first_item_goes_to_position_zero(self, admin_client):
        response = admin_client.post(
            "/api/slider-items",
            json={"title": "New Arrivals", "image_url": "https://cdn.example.com/new.jpg"},
        )

        assert response.status_code == 201
        assert response.json()["data"]["sort_order"] == 0
        assert response.json()["message"] == "Slider item created successfully"

    def test_appended_after_last_item(self, admin_client, db):
        db.add(slide(sort_order=0), slide(sort_order=4))

        response = admin_client.post(
            "/api/slider-items",
            json={"title": "Clearance", "image_url": "https://cdn.example.com/c.jpg"},
        )

        assert response.json()["data"]["sort_order"] == 5

    def test_explicit_position(self, admin_client):
        response = admin_client.post(
            "/api/slider-items",
            json={
                "title": "Clearance",
                "image_url": "https://cdn.example.com/c.jpg",
                "sort_order": 3,
                "link_url": "/products?search=clearance",
            },
        )

        data = response.json()["data"]
        assert data["sort_order"] == 3
        assert data["link_url"] == "/products?search=clearance"

    def test_missing_image_rejected(self, admin_client):
        response = admin_client.post("/api/slider-items", json={"title": "No Image"})

        assert response.status_code == 422

    def test_requires_admin(self, client):
        response = client.post(
            "/api/slider-items",
            json={"title": "Clearance", "image_url": "https://cdn.example.com/c.jpg"},
        )

        assert response.status_code == 401


class TestUpdateSliderItem:
    """Tests for PUT /api/slider-items/{id}."""

    def test_deactivate(self, admin_client, db):
        item = db.add(slide())

        response = admin_client.put(f"/api/slider-items/{item.id}", json={"is_active": False})

        assert response.status_code == 200
        assert response.json()["data"]["is_active"] is False
        assert response.json()["data"]["title"] == "Eid Sale"

    def test_not_found(self, admin_client):
        response = admin_client.put(f"/api/slider-items/{uuid4()}", json={"title": "X"})

        assert response.status_code == 404
        assert response.json()["error"] == "Slider item not found"


class TestDeleteSliderItem:
    """Tests for DELETE /api/slider-items/{id}."""

    def test_delete(self, admin_client, db):
        item = db.add(slide())

        response = admin_client.delete(f"/api/slider-items/{item.id}")

        assert response.status_code == 200
        assert response.json()["message"] == "Slider item deleted successfully"
        assert db.get(SliderItem, item.id) is None
