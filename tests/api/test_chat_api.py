"""API tests for the chat endpoints."""

import json
import uuid

import pytest
from sqlalchemy import func, select

from app.core.dependencies import get_current_user
from app.domains.chat.llm import ModelTurn, ToolCallRequest
from app.domains.chat.service import ChatService
from app.main import app
from models import Chat, Message
from tests.factories import create_chat_with_messages

MOBILE_AGENT = "Expo/2.30.8 CFNetwork/1494.0.7 Darwin/23.4.0"


def chat_body(chat_id=None, text="Any parties this week?", model_id="gemini-1.5-flash"):
    messages = [{"id": "m1", "role": "user", "content": text}] if text else []
    return {"id": str(chat_id or uuid.uuid4()), "messages": messages, "modelId": model_id}


def stream_lines(response):
    return [line for line in response.text.split("\n") if line]


async def _count(session, model):
    result = await session.execute(select(func.count()).select_from(model))
    return result.scalar()


class TestPostChat:
    @pytest.mark.asyncio
    async def test_first_message_creates_chat_and_streams(self, authenticated_client, test_db, test_user, fake_model):
        chat_id = uuid.uuid4()

        response = await authenticated_client.post("/api/chat", json=chat_body(chat_id))

        assert response.status_code == 200
        assert response.headers["x-vercel-ai-data-stream"] == "v1"
        codes = [line.split(":", 1)[0] for line in stream_lines(response)]
        assert codes[0] == "f"
        assert "0" in codes
        assert codes[-2:] == ["8", "d"]

        chat = await ChatService(test_db).get_chat_by_id(chat_id)
        assert chat.user_id == test_user.id
        assert chat.title == "Island plans"
        stored = await ChatService(test_db).get_messages_by_chat_id(chat_id)
        assert [m.role for m in stored] == ["user", "assistant"]
        assert stored[0].content == "Any parties this week?"

        # the model only sees the active tools
        assert fake_model.calls[0]["tools"] == ["getWeather", "getEvents"]

    @pytest.mark.asyncio
    async def test_second_message_reuses_chat(self, authenticated_client, test_db, test_user, fake_model):
        chat, _ = await create_chat_with_messages(test_db, test_user.id)

        response = await authenticated_client.post("/api/chat", json=chat_body(chat.id, text="And tomorrow?"))

        assert response.status_code == 200
        assert fake_model.title_requests == []
        assert await _count(test_db, Chat) == 1
        assert len(await ChatService(test_db).get_messages_by_chat_id(chat.id)) == 4

    @pytest.mark.asyncio
    async def test_tool_step_is_streamed_and_saved(self, authenticated_client, test_db, fake_model):
        fake_model.script(
            ModelTurn(
                tool_calls=[
                    ToolCallRequest(tool_call_id="call_1", tool_name="getEvents", args={"timeFrame": "today"})
                ],
                finish_reason="tool-calls",
            ),
            ModelTurn(text="Nothing on tonight."),
        )
        chat_id = uuid.uuid4()

        response = await authenticated_client.post("/api/chat", json=chat_body(chat_id))

        lines = stream_lines(response)
        codes = [line.split(":", 1)[0] for line in lines]
        assert codes == ["f", "9", "a", "e", "0", "e", "8", "d"]
        tool_result = json.loads(lines[2][2:])
        assert tool_result["toolCallId"] == "call_1"
        assert tool_result["result"]["count"] == 0

        stored = await ChatService(test_db).get_messages_by_chat_id(chat_id)
        assert [m.role for m in stored] == ["user", "assistant", "tool", "assistant"]
        annotations = json.loads(lines[6][2:])
        assert [a["messageIdFromServer"] for a in annotations] == [str(stored[1].id), str(stored[3].id)]

    @pytest.mark.asyncio
    async def test_mobile_client_gets_buffered_json(self, authenticated_client, test_db):
        chat_id = uuid.uuid4()

        response = await authenticated_client.post(
            "/api/chat", json=chat_body(chat_id), headers={"User-Agent": MOBILE_AGENT}
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
        messages = response.json()["messages"]
        assert [m["role"] for m in messages] == ["assistant"]
        assert json.loads(messages[0]["content"]) == [{"type": "text", "text": "Ahoy! Anything else?"}]

        stored = await ChatService(test_db).get_messages_by_chat_id(chat_id)
        assert messages[0]["id"] == str(stored[-1].id)

    @pytest.mark.asyncio
    async def test_unknown_model_writes_nothing(self, authenticated_client, test_db):
        response = await authenticated_client.post("/api/chat", json=chat_body(model_id="gpt-nope"))

        assert response.status_code == 404
        assert response.json()["error_code"] == "MODEL_NOT_FOUND"
        assert await _count(test_db, Chat) == 0
        assert await _count(test_db, Message) == 0

    @pytest.mark.asyncio
    async def test_chat_id_must_be_a_uuid(self, authenticated_client, test_db):
        body = {**chat_body(), "id": "not-a-uuid"}

        response = await authenticated_client.post("/api/chat", json=body)

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"
        assert await _count(test_db, Chat) == 0

    @pytest.mark.asyncio
    async def test_no_user_message(self, authenticated_client, test_db):
        response = await authenticated_client.post("/api/chat", json=chat_body(text=None))

        assert response.status_code == 400
        assert response.json()["message"] == "No user message found"
        assert await _count(test_db, Chat) == 0

    @pytest.mark.asyncio
    async def test_chat_of_another_user_is_rejected(self, authenticated_client, test_db, test_user_2):
        chat, _ = await create_chat_with_messages(test_db, test_user_2.id)

        response = await authenticated_client.post("/api/chat", json=chat_body(chat.id))

        assert response.status_code == 401
        assert len(await ChatService(test_db).get_messages_by_chat_id(chat.id)) == 2

    @pytest.mark.asyncio
    async def test_requires_authentication(self, client):
        response = await client.post("/api/chat", json=chat_body())

        assert response.status_code == 401
        body = response.json()
        assert body["status"] == "error"
        assert body["message"] == "Unauthorized"
        assert "request_id" in body


class TestDeleteChat:
    @pytest.mark.asyncio
    async def test_owner_deletes_chat_and_messages(self, authenticated_client, test_db, test_user):
        chat, _ = await create_chat_with_messages(test_db, test_user.id)

        response = await authenticated_client.delete("/api/chat", params={"id": str(chat.id)})

        assert response.status_code == 200
        assert response.text == "Chat deleted"
        assert await _count(test_db, Chat) == 0
        assert await _count(test_db, Message) == 0

    @pytest.mark.asyncio
    async def test_other_user_cannot_delete(self, authenticated_client, test_db, test_user, test_user_2):
        chat, _ = await create_chat_with_messages(test_db, test_user.id)
        app.dependency_overrides[get_current_user] = lambda: test_user_2

        response = await authenticated_client.delete("/api/chat", params={"id": str(chat.id)})

        assert response.status_code == 401
        assert await _count(test_db, Chat) == 1
        assert await _count(test_db, Message) == 2

    @pytest.mark.asyncio
    async def test_missing_id(self, authenticated_client):
        response = await authenticated_client.delete("/api/chat")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_chat(self, authenticated_client):
        response = await authenticated_client.delete("/api/chat", params={"id": str(uuid.uuid4())})
        assert response.status_code == 404


class TestChatReads:
    @pytest.mark.asyncio
    async def test_preflight(self, client):
        response = await client.options("/api/chat")

        assert response.status_code == 204
        assert "POST" in response.headers["access-control-allow-methods"]

    @pytest.mark.asyncio
    async def test_history_lists_only_own_chats(self, authenticated_client, test_db, test_user, test_user_2):
        mine, _ = await create_chat_with_messages(test_db, test_user.id)
        await create_chat_with_messages(test_db, test_user_2.id)

        response = await authenticated_client.get("/api/history")

        assert response.status_code == 200
        assert [chat["id"] for chat in response.json()["data"]] == [str(mine.id)]

    @pytest.mark.asyncio
    async def test_messages_of_own_chat(self, authenticated_client, test_db, test_user):
        chat, _ = await create_chat_with_messages(test_db, test_user.id, num_messages=2)

        response = await authenticated_client.get(f"/api/chat/{chat.id}/messages")

        assert response.status_code == 200
        data = response.json()["data"]
        assert [m["role"] for m in data] == ["user", "assistant"]
        assert data[1]["content"] == [{"type": "text", "text": "Ahoy!"}]

    @pytest.mark.asyncio
    async def test_messages_of_other_users_chat(self, authenticated_client, test_db, test_user_2):
        chat, _ = await create_chat_with_messages(test_db, test_user_2.id)

        response = await authenticated_client.get(f"/api/chat/{chat.id}/messages")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_models(self, client):
        response = await client.get("/api/models")

        assert response.status_code == 200
        models = response.json()["data"]
        assert {"id", "label", "apiIdentifier", "description"} <= set(models[0])
