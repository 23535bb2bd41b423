"""
Integration tests for chat persistence.

Covers the chat service, the cached reads layered over it and the chat
resolution step of a completion request.
"""

import uuid

import pytest

from app.domains.chat.flow import resolve_chat, response_saver, save_user_message
from app.domains.chat.service import ChatService
from app.exceptions.chat import ChatAlreadyExistsError, ChatOwnershipError
from app.schemas.chat import CoreMessage, MessageRole, TextPart, ToolCallPart
from app.services import cached_queries
from tests.factories import create_chat_with_messages

HELLO = CoreMessage(role=MessageRole.USER, content="Where can I watch the sunset?")


class TestChatService:
    @pytest.mark.asyncio
    async def test_save_chat_and_duplicate_id(self, test_db, session_factory, test_user):
        chat_id = uuid.uuid4()

        chat = await ChatService(test_db).save_chat(chat_id, test_user.id, "Sunsets")
        assert chat.title == "Sunsets"

        async with session_factory() as other:
            with pytest.raises(ChatAlreadyExistsError):
                await ChatService(other).save_chat(chat_id, test_user.id, "Again")

    @pytest.mark.asyncio
    async def test_chats_newest_first(self, test_db, test_user):
        first, _ = await create_chat_with_messages(test_db, test_user.id)
        second, _ = await create_chat_with_messages(test_db, test_user.id)

        chats = await ChatService(test_db).get_chats_by_user_id(test_user.id)

        assert [chat.id for chat in chats] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_save_messages_keeps_order(self, test_db, test_user):
        chat, _ = await create_chat_with_messages(test_db, test_user.id, num_messages=0)
        batch = [{"role": "user", "content": f"message {i}"} for i in range(5)]

        await ChatService(test_db).save_messages(chat.id, batch)

        stored = await ChatService(test_db).get_messages_by_chat_id(chat.id)
        assert [m.content for m in stored] == [f"message {i}" for i in range(5)]

    @pytest.mark.asyncio
    async def test_delete_requires_owner(self, test_db, test_user, test_user_2):
        chat, _ = await create_chat_with_messages(test_db, test_user.id, num_messages=3)
        service = ChatService(test_db)

        assert await service.delete_chat_by_id(chat.id, test_user_2.id) is False
        assert len(await service.get_messages_by_chat_id(chat.id)) == 3

        assert await service.delete_chat_by_id(chat.id, test_user.id) is True
        assert await service.get_chat_by_id(chat.id) is None
        assert await service.get_messages_by_chat_id(chat.id) == []


class TestCachedChatQueries:
    @pytest.mark.asyncio
    async def test_messages_are_decoded(self, test_db, test_user):
        chat, _ = await create_chat_with_messages(test_db, test_user.id, num_messages=2)

        messages = await cached_queries.get_messages_by_chat_id(test_db, chat.id)

        assert messages[0].role == MessageRole.USER
        assert isinstance(messages[0].content, str)
        assert messages[1].content == [{"type": "text", "text": "Ahoy!"}]

    @pytest.mark.asyncio
    async def test_writes_invalidate_reads(self, test_db, test_user):
        chat_id = uuid.uuid4()
        assert await cached_queries.get_chat_by_id(test_db, chat_id) is None
        assert await cached_queries.get_chats_by_user_id(test_db, test_user.id) == []

        await cached_queries.save_chat(test_db, chat_id, test_user.id, "Beaches")

        assert (await cached_queries.get_chat_by_id(test_db, chat_id)).title == "Beaches"
        assert len(await cached_queries.get_chats_by_user_id(test_db, test_user.id)) == 1

        assert await cached_queries.get_messages_by_chat_id(test_db, chat_id) == []
        await cached_queries.save_messages(test_db, chat_id, [{"role": "user", "content": "hi"}])
        assert len(await cached_queries.get_messages_by_chat_id(test_db, chat_id)) == 1

        await cached_queries.delete_chat_by_id(test_db, chat_id, test_user.id)
        assert await cached_queries.get_chat_by_id(test_db, chat_id) is None
        assert await cached_queries.get_chats_by_user_id(test_db, test_user.id) == []


class TestResolveChat:
    @pytest.mark.asyncio
    async def test_creates_chat_with_generated_title(self, test_db, test_user, fake_model):
        chat_id = uuid.uuid4()

        chat = await resolve_chat(test_db, chat_id, test_user, HELLO, fake_model)

        assert chat.id == chat_id
        assert chat.title == "Island plans"
        assert fake_model.title_requests == [HELLO]

    @pytest.mark.asyncio
    async def test_existing_chat_of_other_user_is_rejected(self, test_db, test_user, test_user_2, fake_model):
        chat, _ = await create_chat_with_messages(test_db, test_user.id)

        with pytest.raises(ChatOwnershipError):
            await resolve_chat(test_db, chat.id, test_user_2, HELLO, fake_model)
        assert fake_model.title_requests == []

    @pytest.mark.asyncio
    async def test_concurrent_create_reuses_winner(self, test_db, session_factory, test_user, test_user_2, fake_model):
        chat_id = uuid.uuid4()
        # a cached miss from before the other request committed
        assert await cached_queries.get_chat_by_id(test_db, chat_id) is None
        async with session_factory() as other:
            await ChatService(other).save_chat(chat_id, test_user.id, "Winner")

        chat = await resolve_chat(test_db, chat_id, test_user, HELLO, fake_model)
        assert chat.title == "Winner"

        with pytest.raises(ChatOwnershipError):
            await resolve_chat(test_db, chat_id, test_user_2, HELLO, fake_model)


class TestSaving:
    @pytest.mark.asyncio
    async def test_user_message_is_stored_raw(self, test_db, test_user):
        chat, _ = await create_chat_with_messages(test_db, test_user.id, num_messages=0)

        message_id = await save_user_message(test_db, chat.id, HELLO)

        stored = await ChatService(test_db).get_messages_by_chat_id(chat.id)
        assert [(m.id, m.content) for m in stored] == [(message_id, "Where can I watch the sunset?")]

    @pytest.mark.asyncio
    async def test_response_saver_drops_dangling_tool_calls(self, test_db, session_factory, test_user):
        chat, _ = await create_chat_with_messages(test_db, test_user.id, num_messages=0)
        dangling = CoreMessage(
            role=MessageRole.ASSISTANT,
            content=[
                TextPart(text="Let me check"),
                ToolCallPart(tool_call_id="call_1", tool_name="getWeather", args={}),
            ],
        )

        saved = await response_saver(session_factory, chat.id)([dangling])

        assert len(saved) == 1
        stored = await cached_queries.get_messages_by_chat_id(test_db, chat.id)
        assert [m.id for m in stored] == [saved[0][0]]
        assert stored[0].content == [{"type": "text", "text": "Let me check"}]
