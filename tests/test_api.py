"""Tests for the Flask HTTP handlers."""

import json

import pytest

from donation_tracker.api import create_app, is_positive_amount, sanitize
from donation_tracker.config import Settings
from donation_tracker.export import CAMPAIGNS_FILE, DONATIONS_FILE, IMPACT_LOCATIONS_FILE
from donation_tracker.repository import Repositories


@pytest.fixture
def client():
    app = create_app(repositories=Repositories.load(None))
    app.config["TESTING"] = True
    return app.test_client()


@pytest.fixture
def export_dir(tmp_path):
    donations = [
        {"id": "a1", "donorName": "Major Donor", "amount": 500, "date": "2023-02-01", "campaign": "c1",
         "location": {"country": "United States", "region": "CA", "coordinates": [-119.0, 36.0]},
         "type": "individual"},
        {"id": "a2", "donorName": "Family Foundation", "amount": 1500, "date": "2023-08-01", "campaign": "c2",
         "location": {"country": "United States", "region": "TX", "coordinates": [-97.0, 31.0]},
         "type": "foundation"},
    ]
    campaigns = [
        {"id": "c1", "name": "Acme", "category": "Education", "status": "active", "beneficiaries": 40,
         "location": {"country": "United States", "region": "CA", "coordinates": [-119.0, 36.0]},
         "impactMetrics": {"peopleHelped": 40, "projectsCompleted": 2, "resourcesDistributed": 90}},
    ]
    locations = [{"id": "l1", "name": "CA", "coordinates": [-119.0, 36.0], "totalDonations": 500}]
    for name, payload in ((DONATIONS_FILE, donations), (CAMPAIGNS_FILE, campaigns),
                          (IMPACT_LOCATIONS_FILE, locations)):
        (tmp_path / name).write_text(json.dumps(payload), encoding="utf-8")
    return tmp_path


@pytest.fixture
def export_client(export_dir):
    app = create_app(Settings(output_dir=export_dir))
    app.config["TESTING"] = True
    return app.test_client()


class TestHelpers:
    def test_sanitize(self):
        assert sanitize("  <b>Jane</b> ", 100) == "bJane/b"
        assert sanitize("x" * 300, 200) == "x" * 200

    @pytest.mark.parametrize("value,ok", [
        (10, True), (0.5, True), (0, False), (-5, False), ("10", False),
        (True, False), (None, False), (float("inf"), False),
    ])
    def test_is_positive_amount(self, value, ok):
        assert is_positive_amount(value) is ok


class TestDonations:
    def test_list(self, client):
        resp = client.get("/api/donations")
        assert resp.status_code == 200
        assert [d["id"] for d in resp.get_json()] == ["don-001", "don-002"]

    def test_filter_by_donor_and_region(self, client):
        assert [d["id"] for d in client.get("/api/donations?donor=donor-002").get_json()] == ["don-002"]
        assert [d["id"] for d in client.get("/api/donations?donor=john").get_json()] == ["don-001"]
        assert [d["id"] for d in client.get("/api/donations?region=Europe").get_json()] == ["don-002"]

    def test_date_range_inclusive(self, client):
        resp = client.get("/api/donations?startDate=2024-01-15&endDate=2024-01-15")
        assert [d["id"] for d in resp.get_json()] == ["don-001"]

    def test_invalid_date(self, client):
        resp = client.get("/api/donations?startDate=yesterday")
        assert resp.status_code == 400
        assert "error" in resp.get_json()

    def test_create(self, client):
        resp = client.post("/api/donations", json={
            "donorId": "donor-009", "donorName": "<Pat>", "amount": 75, "campaign": "School Lunch Program",
        })
        assert resp.status_code == 201
        body = resp.get_json()
        assert body["id"].startswith("don-")
        assert body["donorName"] == "Pat"
        assert body["date"]
        listed = client.get("/api/donations?donor=donor-009").get_json()
        assert [d["id"] for d in listed] == [body["id"]]

    def test_ids_unique(self, client):
        payload = {"donorId": "d", "amount": 5, "campaign": "c"}
        first = client.post("/api/donations", json=payload).get_json()["id"]
        second = client.post("/api/donations", json=payload).get_json()["id"]
        assert first != second

    @pytest.mark.parametrize("payload", [
        {"amount": 10, "campaign": "c"},
        {"donorId": "d", "campaign": "c"},
        {"donorId": "d", "amount": -10, "campaign": "c"},
        {"donorId": "d", "amount": "ten", "campaign": "c"},
        {"donorId": "d", "amount": 10},
    ])
    def test_create_rejects_bad_payload(self, client, payload):
        assert client.post("/api/donations", json=payload).status_code == 400

    def test_create_rejects_non_object(self, client):
        resp = client.post("/api/donations", data="[1, 2]", content_type="application/json")
        assert resp.status_code == 400


class TestImpact:
    def test_mock_summary(self, client):
        body = client.get("/api/impact-summary").get_json()
        assert body["totalDonations"] == 1247

    def test_region_override(self, client):
        body = client.get("/api/impact-summary?region=Europe").get_json()
        assert body["totalDonations"] == 315
        assert body["totalAmount"] == 52000
        assert body["totalBeneficiaries"] == 890

    def test_unknown_region_returns_totals(self, client):
        assert client.get("/api/impact-summary?region=Mars").get_json()["totalDonations"] == 1247

    def test_summary_from_export(self, export_client):
        body = export_client.get("/api/impact-summary").get_json()
        assert body["totalDonations"] == 2
        assert body["totalAmount"] == 2000
        assert body["totalBeneficiaries"] == 40
        assert body["impactsByType"]["people_helped"]["total"] == 40
        assert body["regionBreakdown"]["TX"] == {"donations": 1, "amount": 1500, "beneficiaries": 0}

        ca = export_client.get("/api/impact-summary?region=CA").get_json()
        assert ca["totalAmount"] == 500

    def test_locations(self, client, export_client):
        assert client.get("/api/impact-locations").get_json() == []
        assert [loc["name"] for loc in export_client.get("/api/impact-locations").get_json()] == ["CA"]


class TestCampaigns:
    def test_list_and_filter(self, client):
        assert len(client.get("/api/campaigns").get_json()) == 2
        assert [c["id"] for c in client.get("/api/campaigns?status=completed").get_json()] == ["camp-002"]

    def test_get_one(self, client):
        assert client.get("/api/campaigns/camp-001").get_json()["name"] == "School Lunch Program"

    def test_missing(self, client):
        resp = client.get("/api/campaigns/nope")
        assert resp.status_code == 404
        assert resp.get_json() == {"error": "Campaign not found"}

    def test_export_region_filter(self, export_client):
        assert [c["id"] for c in export_client.get("/api/campaigns?region=CA").get_json()] == ["c1"]


class TestDonorProfiles:
    def test_list_and_get(self, client):
        assert len(client.get("/api/donor-profile").get_json()) == 4
        assert client.get("/api/donor-profile/donor-002").get_json()["name"] == "Jane Smith"
        assert client.get("/api/donor-profile?id=donor-003").get_json()["name"] == "Education Foundation"
        assert client.get("/api/donor-profile/donor-999").status_code == 404

    def test_create(self, client):
        resp = client.post("/api/donor-profile", json={"name": "Sam", "email": "sam@example.org"})
        assert resp.status_code == 201
        donor = resp.get_json()
        assert donor["totalDonated"] == 0
        assert donor["preferredCampaigns"] == []
        assert len(client.get("/api/donor-profile").get_json()) == 5

    def test_create_rejects_non_list_campaigns(self, client):
        resp = client.post("/api/donor-profile", json={
            "name": "Sam", "email": "sam@example.org", "preferredCampaigns": "School Lunch Program",
        })
        assert resp.status_code == 400

    def test_create_keeps_campaign_list(self, client):
        resp = client.post("/api/donor-profile", json={
            "name": "Sam", "email": "sam@example.org", "preferredCampaigns": ["School Lunch Program"],
        })
        assert resp.get_json()["preferredCampaigns"] == ["School Lunch Program"]

    def test_create_duplicate_email(self, client):
        resp = client.post("/api/donor-profile", json={"name": "John", "email": "john.doe@email.com"})
        assert resp.status_code == 409

    def test_create_missing_fields(self, client):
        assert client.post("/api/donor-profile", json={"name": "Sam"}).status_code == 400

    def test_update_keeps_id(self, client):
        resp = client.put("/api/donor-profile/donor-001", json={"name": "Johnny", "id": "hijack"})
        assert resp.status_code == 200
        assert resp.get_json()["id"] == "donor-001"
        assert resp.get_json()["name"] == "Johnny"

    def test_update_requires_id(self, client):
        assert client.put("/api/donor-profile", json={"name": "X"}).status_code == 400

    def test_update_missing(self, client):
        assert client.put("/api/donor-profile/donor-999", json={"name": "X"}).status_code == 404

    def test_delete(self, client):
        assert client.delete("/api/donor-profile/donor-004").status_code == 204
        assert client.get("/api/donor-profile/donor-004").status_code == 404
        assert client.delete("/api/donor-profile/donor-004").status_code == 404
        assert client.delete("/api/donor-profile").status_code == 400


class TestFeedback:
    def test_submit_and_list(self, client):
        resp = client.post("/api/feedback", json={
            "beneficiaryName": "Ana", "campaign": "School Lunch Program", "region": "North America",
            "message": "Thank you",
        })
        assert resp.status_code == 201
        body = resp.get_json()
        assert body["message"] == "Feedback submitted successfully"
        assert body["feedback"]["status"] == "pending"
        assert body["feedback"]["id"].startswith("fb-")

        listed = client.get("/api/feedback?status=pending").get_json()
        assert [f["id"] for f in listed] == [body["feedback"]["id"]]
        assert client.get("/api/feedback?region=Asia").get_json() == []

    def test_missing_fields(self, client):
        assert client.post("/api/feedback", json={"beneficiaryName": "Ana"}).status_code == 400


class TestNotifications:
    def test_list_newest_first(self, client):
        resp = client.get("/api/notifications?donorId=donor-001")
        assert resp.status_code == 200
        assert [n["id"] for n in resp.get_json()] == ["notif-002", "notif-001"]
        assert client.get("/api/notifications?donorId=donor-002").get_json() == []

    def test_filters(self, client):
        unread = client.get("/api/notifications?donorId=donor-001&unread=true").get_json()
        assert [n["id"] for n in unread] == ["notif-001"]
        impact = client.get("/api/notifications?donorId=donor-001&type=impact_update").get_json()
        assert [n["id"] for n in impact] == ["notif-002"]

    def test_donor_required(self, client):
        assert client.get("/api/notifications").status_code == 400
        assert client.get("/api/notifications/unread-count").status_code == 400

    def test_unread_count(self, client):
        assert client.get("/api/notifications/unread-count?donorId=donor-001").get_json() == {"count": 1}

    def test_send(self, client):
        resp = client.post("/api/notifications", json={
            "donorId": "donor-002", "type": "thank_you", "title": "Thanks", "message": "Much appreciated",
            "sendEmail": True,
        })
        assert resp.status_code == 201
        body = resp.get_json()
        assert body["id"].startswith("notif-")
        assert body["read"] is False
        assert body["priority"] == "medium"
        assert client.get("/api/notifications/unread-count?donorId=donor-002").get_json() == {"count": 1}

    def test_send_missing_fields(self, client):
        resp = client.post("/api/notifications", json={"donorId": "donor-002", "title": "Thanks"})
        assert resp.status_code == 400

    def test_mark_read(self, client):
        resp = client.put("/api/notifications/mark-read", json={"notificationId": "notif-001"})
        assert resp.status_code == 200
        assert resp.get_json() == {"success": True}
        assert client.get("/api/notifications/unread-count?donorId=donor-001").get_json() == {"count": 0}

    def test_mark_read_errors(self, client):
        assert client.put("/api/notifications/mark-read", json={}).status_code == 400
        resp = client.put("/api/notifications/mark-read", json={"notificationId": "notif-999"})
        assert resp.status_code == 404

    def test_mark_all_read(self, client):
        client.post("/api/notifications", json={
            "donorId": "donor-001", "type": "milestone_reached", "title": "Goal", "message": "Reached",
        })
        assert client.put("/api/notifications/mark-all-read", json={"donorId": "donor-001"}).status_code == 200
        assert client.get("/api/notifications/unread-count?donorId=donor-001").get_json() == {"count": 0}
        assert client.put("/api/notifications/mark-all-read", json={}).status_code == 400

    def test_other_methods_not_allowed(self, client):
        resp = client.delete("/api/notifications")
        assert resp.status_code == 405
        assert resp.get_json() == {"error": "Method not allowed"}


class TestTestimonials:
    def test_verified_filter(self, client):
        verified = client.get("/api/testimonials?verified=true").get_json()
        assert [t["id"] for t in verified] == ["test-001", "test-002"]
        unverified = client.get("/api/testimonials?verified=false").get_json()
        assert [t["id"] for t in unverified] == ["test-003"]
        assert len(client.get("/api/testimonials").get_json()) == 3


class TestErrors:
    def test_unknown_route(self, client):
        resp = client.get("/api/nothing")
        assert resp.status_code == 404
        assert resp.get_json() == {"error": "Not found"}

    def test_method_not_allowed(self, client):
        resp = client.delete("/api/campaigns")
        assert resp.status_code == 405
        assert resp.get_json() == {"error": "Method not allowed"}

    def test_options_preflight(self, client):
        resp = client.options("/api/donations", headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
        })
        assert resp.status_code == 200
        assert resp.headers["Access-Control-Allow-Origin"] == "*"

    def test_cors_header(self, client):
        resp = client.get("/api/campaigns", headers={"Origin": "http://localhost:3000"})
        assert resp.headers["Access-Control-Allow-Origin"] == "*"

    def test_no_mock_serves_empty(self, tmp_path):
        app = create_app(Settings(output_dir=tmp_path, use_mock_data=False))
        client = app.test_client()
        assert client.get("/api/donations").get_json() == []
        assert client.get("/api/donor-profile").get_json() == []
