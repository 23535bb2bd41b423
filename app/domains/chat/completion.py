"""One completion producer, read by both the streaming and the buffered encoder.

``run_completion`` drives the model step by step: each step's text and tool
calls are yielded as events, the requested tools run, their results are fed
back, and the loop stops when the model answers without calling a tool or
the step cap is reached. The whole run shares one deadline.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import AsyncIterator, Awaitable, Optional, Sequence, TypeVar, Union

from app.domains.chat.llm import LanguageModel
from app.domains.chat.models_registry import ChatModel
from app.domains.chat.tools.base import ChatTool, ToolContext
from app.exceptions.ai import AITimeoutError
from app.schemas.chat import CoreMessage, MessageRole, TextPart, ToolCallPart, ToolResultPart

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class TextDelta:
    text: str


@dataclass
class ToolCallEvent:
    call: ToolCallPart


@dataclass
class ToolResultEvent:
    result: ToolResultPart


@dataclass
class StepFinish:
    finish_reason: str
    is_continued: bool = False


@dataclass
class CompletionFinish:
    """Last event: every response message the model produced."""

    messages: list[CoreMessage] = field(default_factory=list)
    finish_reason: str = "stop"


CompletionEvent = Union[TextDelta, ToolCallEvent, ToolResultEvent, StepFinish, CompletionFinish]


class Deadline:
    def __init__(self, seconds: float):
        self._loop = asyncio.get_running_loop()
        self.seconds = seconds
        self._expires_at = self._loop.time() + seconds

    def remaining(self) -> float:
        return self._expires_at - self._loop.time()

    async def run(self, awaitable: Awaitable[T]) -> T:
        remaining = self.remaining()
        if remaining <= 0:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise AITimeoutError(f"Chat completion exceeded {self.seconds} seconds")
        try:
            return await asyncio.wait_for(awaitable, timeout=remaining)
        except asyncio.TimeoutError as e:
            raise AITimeoutError(f"Chat completion exceeded {self.seconds} seconds") from e


async def run_completion(
    language_model: LanguageModel,
    model: ChatModel,
    system: str,
    messages: Sequence[CoreMessage],
    tools: Sequence[ChatTool],
    context: ToolContext,
    max_steps: int,
    max_duration: float,
) -> AsyncIterator[CompletionEvent]:
    deadline = Deadline(max_duration)
    tools_by_name = {tool.name: tool for tool in tools}
    history = list(messages)
    response_messages: list[CoreMessage] = []
    finish_reason = "stop"

    for step in range(max_steps):
        turn = await deadline.run(language_model.generate(model, system, history, tools))
        finish_reason = turn.finish_reason

        parts: list = []
        if turn.text:
            parts.append(TextPart(text=turn.text))
            yield TextDelta(turn.text)

        calls = []
        for request in turn.tool_calls:
            call = ToolCallPart(
                tool_call_id=request.tool_call_id, tool_name=request.tool_name, args=request.args
            )
            calls.append(call)
            parts.append(call)
            yield ToolCallEvent(call)

        assistant = CoreMessage(role=MessageRole.ASSISTANT, content=parts)
        response_messages.append(assistant)
        history.append(assistant)

        if not calls:
            yield StepFinish(finish_reason)
            break

        results = []
        for call in calls:
            tool = tools_by_name.get(call.tool_name)
            if tool is None:
                logger.warning(f"Model asked for unavailable tool {call.tool_name}")
                output = {"error": f"Tool {call.tool_name} is not available"}
            else:
                output = await deadline.run(tool.run(call.args, context))
            result = ToolResultPart(tool_call_id=call.tool_call_id, tool_name=call.tool_name, result=output)
            results.append(result)
            yield ToolResultEvent(result)

        tool_message = CoreMessage(role=MessageRole.TOOL, content=results)
        response_messages.append(tool_message)
        history.append(tool_message)

        is_continued = step + 1 < max_steps
        yield StepFinish("tool-calls", is_continued=is_continued)
        if not is_continued:
            logger.info(f"Completion stopped after {max_steps} steps")

    yield CompletionFinish(messages=response_messages, finish_reason=finish_reason)


async def collect_completion(events: AsyncIterator[CompletionEvent]) -> Optional[CompletionFinish]:
    """Drain a producer, returning its final event."""
    finish = None
    async for event in events:
        if isinstance(event, CompletionFinish):
            finish = event
    return finish
