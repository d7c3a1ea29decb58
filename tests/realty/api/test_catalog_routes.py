"""
Tests for Amenities, Reviews and Drafts APIs
"""
from datetime import datetime, timezone

from src.realty.db.models import Amenity, PropertyDraft, Review


class TestAmenities:
    """Tests for /api/amenities."""

    def test_list_sorted_by_name(self, client, test_db):
        test_db.add_all([Amenity(name="Park"), Amenity(name="ATM", category="Commercial")])
        test_db.commit()

        response = client.get("/api/amenities")

        assert [a["name"] for a in response.json()["amenities"]] == ["ATM", "Park"]

    def test_create(self, client, admin_headers):
        response = client.post(
            "/api/amenities", json={"name": "  Rooftop Garden ", "category": "Residential"}, headers=admin_headers
        )

        assert response.status_code == 201
        assert response.json()["message"] == "Amenity created successfully"
        assert response.json()["amenity"]["name"] == "Rooftop Garden"

    def test_create_duplicate_any_case(self, client, test_db, admin_headers):
        test_db.add(Amenity(name="Gym"))
        test_db.commit()

        response = client.post("/api/amenities", json={"name": "GYM"}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Amenity already exists"}

    def test_name_required(self, client, admin_headers):
        response = client.post("/api/amenities", json={"name": "   "}, headers=admin_headers)

        assert response.json() == {"error": "Amenity name is required"}

    def test_update(self, client, test_db, admin_headers):
        gym = Amenity(name="Gym")
        pool = Amenity(name="Pool")
        test_db.add_all([gym, pool])
        test_db.commit()

        renamed = client.put(f"/api/amenities/{gym.id}", json={"name": "Fitness Centre"}, headers=admin_headers)
        clash = client.put(f"/api/amenities/{gym.id}", json={"name": "pool"}, headers=admin_headers)
        same_name = client.put(f"/api/amenities/{pool.id}", json={"name": "Pool", "category": "Common"},
                               headers=admin_headers)

        assert renamed.json()["amenity"]["name"] == "Fitness Centre"
        assert clash.json() == {"error": "Amenity name already exists"}
        assert same_name.json()["amenity"]["category"] == "Common"

    def test_update_missing(self, client, admin_headers):
        response = client.put("/api/amenities/nope", json={"name": "Lift"}, headers=admin_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "Amenity not found"}

    def test_delete(self, client, test_db, admin_headers):
        lift = Amenity(name="Lift")
        test_db.add(lift)
        test_db.commit()

        assert client.delete(f"/api/amenities/{lift.id}", headers=admin_headers).json() == {
            "message": "Amenity deleted successfully"
        }
        assert client.delete(f"/api/amenities/{lift.id}", headers=admin_headers).status_code == 404

    def test_changes_need_admin(self, client, user_headers):
        assert client.post("/api/amenities", json={"name": "Lift"}, headers=user_headers).status_code == 403


class TestReviews:
    """Tests for /api/reviews."""

    def test_review_hidden_until_approved(self, client, make_property, user_headers, admin_headers):
        property_obj = make_property()

        created = client.post(
            "/api/reviews",
            json={"property_id": property_obj.id, "rating": "4", "comment": "Great light"},
            headers=user_headers,
        )
        before = client.get(f"/api/reviews/property/{property_obj.id}").json()
        review_id = created.json()["review"]["id"]
        approved = client.put(f"/api/reviews/{review_id}/approve", headers=admin_headers)
        after = client.get(f"/api/reviews/property/{property_obj.id}").json()

        assert created.status_code == 201
        assert created.json()["message"] == "Review submitted successfully"
        assert created.json()["review"]["user_name"] == "Priya Shah"
        assert created.json()["review"]["rating"] == 4
        assert before["reviews"] == []
        assert before["stats"]["average_rating"] == 0
        assert approved.json()["message"] == "Review approved successfully"
        assert [r["id"] for r in after["reviews"]] == [review_id]
        assert after["stats"]["total_reviews"] == 1
        assert after["stats"]["rating_breakdown"]["4"] == 1

    def test_one_review_per_user(self, client, make_property, user_headers):
        property_obj = make_property()
        body = {"property_id": property_obj.id, "rating": 5}

        client.post("/api/reviews", json=body, headers=user_headers)
        second = client.post("/api/reviews", json=body, headers=user_headers)

        assert second.status_code == 400
        assert second.json() == {"error": "You have already reviewed this property"}

    def test_rating_range(self, client, make_property, user_headers):
        property_obj = make_property()

        for rating in (0, 6, "five", 4.5):
            response = client.post(
                "/api/reviews", json={"property_id": property_obj.id, "rating": rating}, headers=user_headers
            )
            assert response.status_code == 400
            assert response.json()["errors"][0]["message"] == "Rating must be between 1 and 5"

    def test_unknown_property(self, client, user_headers):
        response = client.post("/api/reviews", json={"property_id": "missing", "rating": 3}, headers=user_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "Property not found"}

    def test_any_status_can_be_reviewed(self, client, make_property, user_headers):
        sold = make_property(status="Sold")

        response = client.post("/api/reviews", json={"property_id": sold.id, "rating": 3}, headers=user_headers)

        assert response.status_code == 201

    def test_delete(self, client, test_db, make_property, regular_user, admin_headers):
        property_obj = make_property()
        review = Review(property_id=property_obj.id, user_id=regular_user.id, user_name="Priya", rating=2)
        test_db.add(review)
        test_db.commit()

        deleted = client.delete(f"/api/reviews/{review.id}", headers=admin_headers)
        missing = client.put(f"/api/reviews/{review.id}/approve", headers=admin_headers)

        assert deleted.json() == {"message": "Review deleted successfully"}
        assert missing.json() == {"error": "Review not found"}


class TestDrafts:
    """Tests for /api/drafts."""

    def test_save_and_list(self, client, user_headers):
        created = client.post(
            "/api/drafts", json={"title": "Half done", "payload": '{"price": 100}'}, headers=user_headers
        )
        listed = client.get("/api/drafts", headers=user_headers).json()

        assert created.status_code == 201
        assert created.json()["message"] == "Draft saved successfully"
        assert created.json()["draft"]["payload"] == {"price": 100}
        assert [d["title"] for d in listed["drafts"]] == ["Half done"]

    def test_malformed_payload_saved_empty(self, client, user_headers):
        created = client.post("/api/drafts", json={"payload": "{broken"}, headers=user_headers)

        assert created.json()["draft"]["payload"] == {}

    def test_update(self, client, user_headers):
        draft_id = client.post("/api/drafts", json={"title": "Old"}, headers=user_headers).json()["draft"]["id"]

        updated = client.put(f"/api/drafts/{draft_id}", json={"payload": {"bhk": "3 BHK"}}, headers=user_headers)
        empty = client.put(f"/api/drafts/{draft_id}", json={}, headers=user_headers)

        assert updated.json()["message"] == "Draft updated successfully"
        assert updated.json()["draft"]["title"] == "Old"
        assert updated.json()["draft"]["payload"] == {"bhk": "3 BHK"}
        assert empty.json() == {"error": "No fields to update"}

    def test_update_bumps_updated_at(self, client, test_db, user_headers):
        """Saving a draft again moves updated_at but keeps created_at."""
        created = client.post("/api/drafts", json={"title": "Old"}, headers=user_headers).json()["draft"]
        draft_id = created["id"]
        stale = datetime(2020, 1, 1, tzinfo=timezone.utc)
        draft = test_db.get(PropertyDraft, draft_id)
        draft.updated_at = stale
        test_db.commit()

        response = client.put(f"/api/drafts/{draft_id}", json={"title": "Old"}, headers=user_headers)
        updated = response.json()["draft"]

        assert updated["created_at"] == created["created_at"]
        assert not updated["updated_at"].startswith("2020-01-01")

    def test_timestamps_are_utc(self, client, user_headers):
        created = client.post("/api/drafts", json={"title": "Zoned"}, headers=user_headers).json()["draft"]
        listed = client.get("/api/drafts", headers=user_headers).json()["drafts"][0]

        assert created["created_at"].endswith(("Z", "+00:00"))
        assert listed["created_at"] == created["created_at"]

    def test_drafts_are_private(self, client, user_headers, admin_headers):
        draft_id = client.post("/api/drafts", json={"title": "Mine"}, headers=user_headers).json()["draft"]["id"]

        assert client.get("/api/drafts", headers=admin_headers).json() == {"drafts": []}
        assert client.put(f"/api/drafts/{draft_id}", json={"title": "x"}, headers=admin_headers).status_code == 404
        assert client.delete(f"/api/drafts/{draft_id}", headers=admin_headers).json() == {
            "error": "Draft not found"
        }

    def test_delete(self, client, user_headers):
        draft_id = client.post("/api/drafts", json={}, headers=user_headers).json()["draft"]["id"]

        response = client.delete(f"/api/drafts/{draft_id}", headers=user_headers)

        assert response.json() == {"message": "Draft deleted successfully"}
        assert client.get("/api/drafts", headers=user_headers).json() == {"drafts": []}
