"""Encoders over the completion producer.

Web clients get the data-stream protocol: one ``<code>:<json>`` line per part
(``0`` text, ``9`` tool call, ``a`` tool result, ``e`` step finish, ``8``
message annotations, ``d`` finish, ``3`` error). Native mobile clients get a
single buffered ``{messages: [...]}`` document.
"""

import json
import logging
from typing import Any, AsyncIterator, Awaitable, Callable
from uuid import UUID, uuid4

from sqlalchemy.exc import SQLAlchemyError

from app.domains.chat.completion import (
    CompletionEvent,
    CompletionFinish,
    StepFinish,
    TextDelta,
    ToolCallEvent,
    ToolResultEvent,
    collect_completion,
)
from app.domains.chat.messages import format_message_content
from app.exceptions.ai import AIServiceError
from app.schemas.chat import CoreMessage, MessageRole, MobileChatResponse, MobileMessage

logger = logging.getLogger(__name__)

MOBILE_AGENT_MARKERS = ("Expo", "React Native")

SavedMessages = list[tuple[UUID, CoreMessage]]
ResponseSaver = Callable[[list[CoreMessage]], Awaitable[SavedMessages]]


def is_mobile_client(user_agent: str | None) -> bool:
    return any(marker in (user_agent or "") for marker in MOBILE_AGENT_MARKERS)


def data_stream_part(code: str, value: Any) -> str:
    return f"{code}:{json.dumps(value, separators=(',', ':'), default=str)}\n"


def server_id_annotations(saved: SavedMessages) -> list[dict[str, str]]:
    return [
        {"messageIdFromServer": str(message_id)}
        for message_id, message in saved
        if message.role == MessageRole.ASSISTANT
    ]


async def encode_data_stream(
    events: AsyncIterator[CompletionEvent], save_response: ResponseSaver
) -> AsyncIterator[str]:
    """Stream the completion; the response is saved before the finish part."""
    yield data_stream_part("f", {"messageId": f"msg-{uuid4().hex}"})
    try:
        async for event in events:
            if isinstance(event, TextDelta):
                yield data_stream_part("0", event.text)
            elif isinstance(event, ToolCallEvent):
                yield data_stream_part(
                    "9",
                    {
                        "toolCallId": event.call.tool_call_id,
                        "toolName": event.call.tool_name,
                        "args": event.call.args,
                    },
                )
            elif isinstance(event, ToolResultEvent):
                yield data_stream_part(
                    "a", {"toolCallId": event.result.tool_call_id, "result": event.result.result}
                )
            elif isinstance(event, StepFinish):
                yield data_stream_part(
                    "e", {"finishReason": event.finish_reason, "isContinued": event.is_continued}
                )
            elif isinstance(event, CompletionFinish):
                saved = await save_response(event.messages)
                annotations = server_id_annotations(saved)
                if annotations:
                    yield data_stream_part("8", annotations)
                yield data_stream_part("d", {"finishReason": event.finish_reason})
    except AIServiceError as e:
        logger.error(f"Chat completion failed: {e.message}")
        yield data_stream_part("3", e.message)
    except SQLAlchemyError:
        logger.exception("Failed to save chat")
        yield data_stream_part("3", "Failed to save chat")


async def buffer_mobile_response(
    events: AsyncIterator[CompletionEvent], save_response: ResponseSaver
) -> MobileChatResponse:
    """Wait for the completion and return the saved messages with their ids."""
    finish = await collect_completion(events)
    saved = await save_response(finish.messages if finish else [])
    return MobileChatResponse(
        messages=[
            MobileMessage(id=str(message_id), role=message.role, content=format_message_content(message))
            for message_id, message in saved
        ]
    )
