"""Message conversion, storage formatting and response sanitizing."""

import json
from typing import Any, Iterable, List, Optional

from pydantic import TypeAdapter

from app.schemas.chat import (
    ContentPart,
    CoreMessage,
    MessageRole,
    TextPart,
    ToolCallPart,
    ToolResultPart,
    UIMessage,
)

_parts_adapter = TypeAdapter(List[ContentPart])


def _dump_part(part: Any) -> dict:
    return part.model_dump(by_alias=True)


def convert_to_core_messages(messages: Iterable[UIMessage]) -> List[CoreMessage]:
    """
    Normalize client messages.

    An assistant message carrying tool invocations becomes an assistant turn
    (text plus tool calls) followed by a tool turn holding the results that
    have already come back.
    """
    core: List[CoreMessage] = []
    for message in messages:
        content = message.content
        if isinstance(content, list):
            content = _parts_adapter.validate_python(content)

        if message.role != MessageRole.ASSISTANT or not message.tool_invocations:
            core.append(CoreMessage(role=message.role, content=content))
            continue

        parts: list = []
        if isinstance(content, str):
            if content:
                parts.append(TextPart(text=content))
        else:
            parts.extend(content)
        parts.extend(
            ToolCallPart(tool_call_id=inv.tool_call_id, tool_name=inv.tool_name, args=inv.args)
            for inv in message.tool_invocations
        )
        core.append(CoreMessage(role=MessageRole.ASSISTANT, content=parts))

        results = [
            ToolResultPart(tool_call_id=inv.tool_call_id, tool_name=inv.tool_name, result=inv.result)
            for inv in message.tool_invocations
            if inv.state == "result"
        ]
        if results:
            core.append(CoreMessage(role=MessageRole.TOOL, content=results))
    return core


def get_most_recent_user_message(messages: List[CoreMessage]) -> Optional[CoreMessage]:
    for message in reversed(messages):
        if message.role == MessageRole.USER:
            return message
    return None


def message_text(message: CoreMessage) -> str:
    """Plain text of a message, ignoring tool parts."""
    if isinstance(message.content, str):
        return message.content
    return "".join(part.text for part in message.content if isinstance(part, TextPart))


def format_message_content(message: CoreMessage) -> str:
    """
    Storage form of a message.

    User turns keep their raw text. Assistant turns become a JSON list of
    ``text`` and ``tool-call`` blocks, tool turns a JSON list of
    ``tool-result`` blocks.
    """
    content = message.content
    if message.role == MessageRole.USER:
        if isinstance(content, str):
            return content
        return json.dumps([_dump_part(part) for part in content])

    if message.role == MessageRole.TOOL:
        parts = content if isinstance(content, list) else []
        return json.dumps(
            [_dump_part(part) for part in parts if isinstance(part, ToolResultPart)],
            default=str,
        )

    if message.role == MessageRole.ASSISTANT:
        if isinstance(content, str):
            return json.dumps([{"type": "text", "text": content}])
        return json.dumps(
            [_dump_part(part) for part in content if isinstance(part, (TextPart, ToolCallPart))],
            default=str,
        )

    return content if isinstance(content, str) else ""


def parse_stored_content(role: Any, content: str) -> Any:
    """Inverse of ``format_message_content`` at the JSON level."""
    if MessageRole(role) == MessageRole.USER:
        return content
    try:
        return json.loads(content)
    except json.JSONDecodeError:
        return content


def parse_message(role: Any, content: str) -> CoreMessage:
    """Rebuild a ``CoreMessage`` from a stored row."""
    role = MessageRole(role)
    parsed = parse_stored_content(role, content)
    if isinstance(parsed, list):
        return CoreMessage(role=role, content=_parts_adapter.validate_python(parsed))
    return CoreMessage(role=role, content=parsed)


def sanitize_response_messages(messages: List[CoreMessage]) -> List[CoreMessage]:
    """
    Drop incomplete tool calls from a finished completion.

    A tool call whose result never arrived is removed, as are empty text
    blocks; an assistant turn left with nothing is removed altogether.
    """
    answered = {
        part.tool_call_id
        for message in messages
        if message.role == MessageRole.TOOL and isinstance(message.content, list)
        for part in message.content
        if isinstance(part, ToolResultPart)
    }

    sanitized: List[CoreMessage] = []
    for message in messages:
        if message.role != MessageRole.ASSISTANT or isinstance(message.content, str):
            if message.content:
                sanitized.append(message)
            continue

        parts = [
            part
            for part in message.content
            if (isinstance(part, TextPart) and part.text)
            or (isinstance(part, ToolCallPart) and part.tool_call_id in answered)
        ]
        if parts:
            sanitized.append(CoreMessage(role=message.role, content=parts))
    return sanitized
