from unittest.mock import patch

from fastapi.testclient import TestClient

from refugeeconnect.api.rate_limit import RateLimiter, api_limiter


class TestGroups:
    def test_seeded_groups(self, auth_client: TestClient):
        groups = auth_client.get("/api/community/groups").json()["groups"]
        assert [(g["name"], g["members"]) for g in groups] == [
            ("Kampala Refugee Community", 150),
            ("Education Support Group", 75),
        ]

    def test_join_increments_members(self, auth_client: TestClient):
        group_id = auth_client.get("/api/community/groups").json()["groups"][1]["id"]

        response = auth_client.post(f"/api/community/groups/{group_id}/join")

        assert response.json()["group"]["members"] == 76
        assert auth_client.get("/api/community/groups").json()["groups"][1]["members"] == 76

    def test_join_unknown_group(self, auth_client: TestClient):
        response = auth_client.post("/api/community/groups/999/join")
        assert response.status_code == 404
        assert response.json() == {"error": "Community group not found"}

    def test_groups_require_login(self, client: TestClient):
        assert client.get("/api/community/groups").status_code == 401


class TestMessages:
    def test_post_and_read_in_order(self, auth_client: TestClient):
        group_id = auth_client.get("/api/community/groups").json()["groups"][0]["id"]
        for text in ("first", "second", "third"):
            auth_client.post("/api/community/messages", json={"groupId": group_id, "message": f"  {text} "})
        auth_client.post("/api/community/messages", json={"message": "no group"})

        messages = auth_client.get("/api/community/messages", params={"groupId": group_id, "limit": 2}).json()["messages"]

        assert [m["message"] for m in messages] == ["second", "third"]
        assert messages[0]["userName"] == "Amina Okello"
        assert messages[0]["groupId"] == group_id

    def test_blank_message_rejected(self, auth_client: TestClient):
        response = auth_client.post("/api/community/messages", json={"message": "   "})
        assert response.status_code == 400


class TestCatalogs:
    def test_emergency_contacts(self, auth_client: TestClient):
        contacts = auth_client.get("/api/emergency/contacts").json()["contacts"]
        assert {"name": "Police Emergency", "number": "999", "type": "police", "available": "24/7"} in contacts

    def test_emergency_report(self, auth_client: TestClient):
        response = auth_client.post(
            "/api/emergency/report", json={"type": "medical", "description": "Child with fever", "location": "Nakivale"}
        )
        data = response.json()
        assert data["success"] is True
        assert data["reportId"]

    def test_services_filter(self, auth_client: TestClient):
        assert len(auth_client.get("/api/services").json()["services"]) == 3
        healthcare = auth_client.get("/api/services", params={"category": "healthcare"}).json()["services"]
        assert [s["id"] for s in healthcare] == [2]
        search = auth_client.get("/api/services", params={"search": "SCHOOL"}).json()["services"]
        assert [s["name"] for s in search] == ["Education Support"]

    def test_service_detail(self, auth_client: TestClient):
        assert auth_client.get("/api/services/1").json()["service"]["name"] == "UNHCR Registration"
        response = auth_client.get("/api/services/42")
        assert response.status_code == 404
        assert response.json() == {"error": "Service not found"}


class TestRateLimiter:
    def test_window(self):
        limiter = RateLimiter(2, 60, "slow down")
        assert limiter.hit("a") and limiter.hit("a")
        assert not limiter.hit("a")
        assert limiter.hit("b")
        limiter.reset()
        assert limiter.hit("a")

    def test_idle_clients_are_forgotten(self):
        with patch("refugeeconnect.api.rate_limit.time.monotonic", return_value=0.0) as clock:
            limiter = RateLimiter(2, 60, "slow down")
            limiter.hit("a")
            limiter.hit("b")
            assert limiter.tracked_clients() == 2

            clock.return_value = 61.0
            assert limiter.hit("c")

        assert limiter.tracked_clients() == 1

    def test_api_limiter(self, auth_client: TestClient):
        for _ in range(api_limiter.limit):
            api_limiter.hit("testclient")

        response = auth_client.get("/api/services")

        assert response.status_code == 429
        assert response.json() == {"error": "Too many requests, please try again later."}
