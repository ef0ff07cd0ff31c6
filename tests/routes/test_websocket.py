from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from refugeeconnect.api.prompt_utilities import FALLBACK_RESPONSES
from refugeeconnect.api.rate_limit import ai_limiter
from refugeeconnect.database.core.interactions import get_history
from tests.helpers import login_as


class TestAIQueryEvents:
    def test_anonymous_query(self, client: TestClient, completion_client):
        with client.websocket_connect("/ws") as websocket:
            websocket.send_json({"event": "ai-query", "data": {"message": "Hello", "language": "en"}})
            frame = websocket.receive_json()

        assert frame["event"] == "ai-response"
        assert frame["data"]["response"] == "Stub answer"
        assert "interactionId" not in frame["data"]

    def test_authenticated_query_is_recorded(self, client: TestClient, user):
        login_as(client, user)
        with client.websocket_connect("/ws") as websocket:
            websocket.send_json({"event": "ai-query", "data": {"message": "Where is the clinic?", "language": "sw"}})
            frame = websocket.receive_json()

        assert frame["data"]["language"] == "sw"
        history = get_history(user_id=user["id"], page=1, limit=20)
        assert history["interactions"][0]["id"] == frame["data"]["interactionId"]

    def test_completion_failure_is_a_fallback_response(self, client: TestClient, completion_client):
        completion_client.complete.side_effect = TimeoutError()
        with client.websocket_connect("/ws") as websocket:
            websocket.send_json({"event": "ai-query", "data": {"message": "Hello", "language": "lg"}})
            frame = websocket.receive_json()

        assert frame["event"] == "ai-response"
        assert frame["data"]["error"] is True
        assert frame["data"]["response"] == FALLBACK_RESPONSES["lg"]

    def test_pipeline_crash_is_an_ai_error(self, client: TestClient):
        client.app.state.ai_service = MagicMock()
        client.app.state.ai_service.process_query.side_effect = RuntimeError("boom")
        with client.websocket_connect("/ws") as websocket:
            websocket.send_json({"event": "ai-query", "data": {"message": "Hello"}})
            frame = websocket.receive_json()

        assert frame == {"event": "ai-error", "data": {"message": "Failed to process your request"}}


class TestCommunityRelay:
    def test_message_reaches_other_members_only(self, client: TestClient):
        with client.websocket_connect("/ws") as sender, client.websocket_connect("/ws") as member:
            sender.send_json({"event": "join-community", "data": "7"})
            member.send_json({"event": "join-community", "data": "7"})
            # a round trip guarantees both joins were processed
            member.send_json({"event": "ai-query", "data": {"message": "sync"}})
            member.receive_json()
            sender.send_json({"event": "ai-query", "data": {"message": "sync"}})
            sender.receive_json()

            sender.send_json({"event": "community-message", "data": {"communityId": "7", "message": "Hello all"}})
            frame = member.receive_json()

        assert frame == {"event": "new-message", "data": {"communityId": "7", "message": "Hello all"}}


class TestAIQueryGuards:
    def test_blank_and_oversized_messages_are_rejected(self, client: TestClient, completion_client):
        with client.websocket_connect("/ws") as websocket:
            websocket.send_json({"event": "ai-query", "data": {"message": "   "}})
            blank = websocket.receive_json()
            websocket.send_json({"event": "ai-query", "data": {"message": "x" * 5000}})
            oversized = websocket.receive_json()

        assert blank == {"event": "ai-error", "data": {"message": "Message is required"}}
        assert oversized == {
            "event": "ai-error",
            "data": {"message": "Message is too long. Please limit to 1000 characters."},
        }
        assert completion_client.complete.call_count == 0

    def test_ai_rate_limit_applies_to_sockets(self, client: TestClient, completion_client):
        for _ in range(ai_limiter.limit):
            ai_limiter.hit("testclient")

        with client.websocket_connect("/ws") as websocket:
            websocket.send_json({"event": "ai-query", "data": {"message": "Hello"}})
            frame = websocket.receive_json()

        assert frame == {"event": "ai-error", "data": {"message": ai_limiter.message}}
        completion_client.complete.assert_not_called()
