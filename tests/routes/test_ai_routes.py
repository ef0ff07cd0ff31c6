from fastapi.testclient import TestClient

from refugeeconnect.api.prompt_utilities import FALLBACK_RESPONSES
from tests.helpers import login_as


class TestQueryEndpoint:
    def test_requires_login(self, client: TestClient):
        response = client.post("/api/ai/query", json={"message": "Hello"})
        assert response.status_code == 401

    def test_answer_and_history(self, auth_client: TestClient, completion_client):
        response = auth_client.post("/api/ai/query", json={"message": "  How do I register?  ", "language": "en"})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["response"] == "Stub answer"
        assert data["sources"] == []
        assert data["language"] == "en"
        assert "interactionId" in data
        assert 'User query: "How do I register?"' in completion_client.complete.call_args.args[0]

        history = auth_client.get("/api/ai/history").json()
        assert [i["id"] for i in history["interactions"]] == [data["interactionId"]]

    def test_language_defaults_to_preferred(self, client: TestClient, user, completion_client):
        from refugeeconnect.database.core.funcs import update_profile

        update_profile(user_id=user["id"], changes={"preferred_language": "lg"})
        login_as(client, user)

        data = client.post("/api/ai/query", json={"message": "Hello"}).json()

        assert data["language"] == "lg"

    def test_blank_message(self, auth_client: TestClient):
        response = auth_client.post("/api/ai/query", json={"message": "   "})
        assert response.status_code == 400
        assert response.json() == {"error": "Message is required"}

    def test_message_too_long(self, auth_client: TestClient):
        response = auth_client.post("/api/ai/query", json={"message": "x" * 1001})
        assert response.status_code == 400
        assert response.json() == {"error": "Message is too long. Please limit to 1000 characters."}

    def test_message_at_limit_is_accepted(self, auth_client: TestClient):
        assert auth_client.post("/api/ai/query", json={"message": "x" * 1000}).status_code == 200

    def test_completion_failure_returns_fallback(self, auth_client: TestClient, completion_client):
        completion_client.complete.side_effect = TimeoutError()

        response = auth_client.post("/api/ai/query", json={"message": "Hello", "language": "sw"})

        assert response.status_code == 200
        data = response.json()
        assert data["error"] is True
        assert data["response"] == FALLBACK_RESPONSES["sw"]
        assert auth_client.get("/api/ai/history").json()["interactions"] == []


class TestHistory:
    def test_pagination_newest_first(self, auth_client: TestClient):
        for i in range(3):
            auth_client.post("/api/ai/query", json={"message": f"question {i}"})

        page = auth_client.get("/api/ai/history", params={"page": 1, "limit": 2}).json()

        assert [i["query"] for i in page["interactions"]] == ["question 2", "question 1"]
        assert page["pagination"] == {"current": 1, "total": 2, "hasNext": True, "hasPrev": False}

    def test_clear_history(self, auth_client: TestClient):
        auth_client.post("/api/ai/query", json={"message": "one"})
        auth_client.post("/api/ai/query", json={"message": "two"})

        response = auth_client.delete("/api/ai/history")

        assert response.json()["deletedCount"] == 2
        assert auth_client.get("/api/ai/history").json()["interactions"] == []


class TestFeedback:
    def test_owner_can_rate(self, auth_client: TestClient):
        interaction_id = auth_client.post("/api/ai/query", json={"message": "Hello"}).json()["interactionId"]

        response = auth_client.post(
            f"/api/ai/feedback/{interaction_id}", json={"helpful": "true", "rating": 5, "comment": "Clear"}
        )

        assert response.status_code == 200
        feedback = auth_client.get("/api/ai/history").json()["interactions"][0]["feedback"]
        assert feedback == {"helpful": True, "rating": 5, "comment": "Clear"}

    def test_omitted_helpful_is_false(self, auth_client: TestClient):
        interaction_id = auth_client.post("/api/ai/query", json={"message": "Hello"}).json()["interactionId"]

        auth_client.post(f"/api/ai/feedback/{interaction_id}", json={"rating": 3})

        feedback = auth_client.get("/api/ai/history").json()["interactions"][0]["feedback"]
        assert feedback == {"helpful": False, "rating": 3, "comment": None}

    def test_other_users_interaction_is_404(self, client: TestClient, user, other_user):
        login_as(client, user)
        interaction_id = client.post("/api/ai/query", json={"message": "Hello"}).json()["interactionId"]

        login_as(client, other_user)
        response = client.post(f"/api/ai/feedback/{interaction_id}", json={"helpful": False})

        assert response.status_code == 404
        assert response.json() == {"error": "Interaction not found"}

    def test_rating_out_of_range(self, auth_client: TestClient):
        interaction_id = auth_client.post("/api/ai/query", json={"message": "Hello"}).json()["interactionId"]
        response = auth_client.post(f"/api/ai/feedback/{interaction_id}", json={"rating": 6})
        assert response.status_code == 400


class TestAnalytics:
    def test_admin_only(self, auth_client: TestClient):
        assert auth_client.get("/api/ai/analytics").status_code == 403

    def test_aggregates(self, client: TestClient, user, admin_user):
        login_as(client, user)
        client.post("/api/ai/query", json={"message": "one", "language": "en"})
        client.post("/api/ai/query", json={"message": "two", "language": "sw"})

        login_as(client, admin_user)
        data = client.get("/api/ai/analytics").json()
        analytics = data["analytics"]

        assert analytics["totalInteractions"] == 2
        assert analytics["languageDistribution"] == {"en": 1, "sw": 1}
        assert analytics["averageConfidence"] is None
        assert analytics["averageProcessingTime"] is not None
        assert "recentInteractions" not in analytics
        assert len(data["recentInteractions"]) == 2
        assert data["recentInteractions"][0]["user"]["email"] == "amina@example.org"


class TestRateLimit:
    def test_ai_limiter(self, auth_client: TestClient):
        for _ in range(15):
            assert auth_client.post("/api/ai/query", json={"message": "Hello"}).status_code == 200

        response = auth_client.post("/api/ai/query", json={"message": "Hello"})

        assert response.status_code == 429
        assert response.json() == {"error": "Too many AI requests, please wait before asking again."}
