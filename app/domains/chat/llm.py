"""Language model access for the chat route.

``LanguageModel`` is the seam the completion loop talks to: one call per step,
returning the text and tool calls the model produced. ``GeminiLanguageModel``
implements it with google-generativeai.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, Sequence

import google.generativeai as genai
from google.generativeai.types import HarmBlockThreshold, HarmCategory

from app.core.config import settings
from app.domains.chat.messages import message_text
from app.domains.chat.models_registry import ChatModel
from app.domains.chat.prompts import TITLE_PROMPT
from app.domains.chat.tools.base import ChatTool
from app.exceptions.ai import AIConfigurationError, AIContentFilterError, AIServiceError, map_ai_error
from app.schemas.chat import CoreMessage, MessageRole, TextPart, ToolCallPart, ToolResultPart

logger = logging.getLogger(__name__)

SAFETY_SETTINGS = {
    HarmCategory.HARM_CATEGORY_HARASSMENT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    HarmCategory.HARM_CATEGORY_HATE_SPEECH: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
}

TITLE_MAX_LENGTH = 80


@dataclass
class ToolCallRequest:
    tool_call_id: str
    tool_name: str
    args: dict[str, Any] = field(default_factory=dict)


@dataclass
class ModelTurn:
    """What the model produced in one step."""

    text: str = ""
    tool_calls: list[ToolCallRequest] = field(default_factory=list)
    finish_reason: str = "stop"


class LanguageModel(Protocol):
    async def generate(
        self,
        model: ChatModel,
        system: str,
        messages: Sequence[CoreMessage],
        tools: Sequence[ChatTool],
    ) -> ModelTurn: ...

    async def generate_title(self, message: CoreMessage) -> str: ...


def fallback_title(message: CoreMessage) -> str:
    text = " ".join(message_text(message).split())
    return text[:TITLE_MAX_LENGTH] or "New chat"


def _to_contents(messages: Sequence[CoreMessage]) -> tuple[list[str], list[Any]]:
    """Split system text out and convert the rest to Gemini contents."""
    system: list[str] = []
    contents: list[Any] = []
    for message in messages:
        if message.role == MessageRole.SYSTEM:
            system.append(message_text(message))
            continue

        parts = message.content
        if isinstance(parts, str):
            parts = [TextPart(text=parts)] if parts else []

        proto_parts = []
        for part in parts:
            if isinstance(part, TextPart) and part.text:
                proto_parts.append(genai.protos.Part(text=part.text))
            elif isinstance(part, ToolCallPart):
                proto_parts.append(
                    genai.protos.Part(
                        function_call=genai.protos.FunctionCall(name=part.tool_name, args=part.args)
                    )
                )
            elif isinstance(part, ToolResultPart):
                proto_parts.append(
                    genai.protos.Part(
                        function_response=genai.protos.FunctionResponse(
                            name=part.tool_name, response={"result": part.result}
                        )
                    )
                )
        if not proto_parts:
            continue

        role = "model" if message.role == MessageRole.ASSISTANT else "user"
        contents.append(genai.protos.Content(role=role, parts=proto_parts))
    return system, contents


def _parse_response(response: Any) -> ModelTurn:
    if not response or not getattr(response, "candidates", None):
        logger.error(f"Gemini returned no candidates: {getattr(response, 'prompt_feedback', None)}")
        raise AIContentFilterError("Content was blocked by AI safety filters. Please rephrase your request.")

    candidate = response.candidates[0]
    finish_reason = getattr(candidate.finish_reason, "name", str(candidate.finish_reason))
    if finish_reason == "SAFETY":
        raise AIContentFilterError("Content was blocked by AI safety filters. Please rephrase your request.")

    turn = ModelTurn(finish_reason=finish_reason.lower())
    texts = []
    for part in candidate.content.parts:
        function_call = part.function_call
        if function_call and function_call.name:
            args = type(function_call).to_dict(function_call).get("args") or {}
            turn.tool_calls.append(
                ToolCallRequest(
                    tool_call_id=f"call_{uuid.uuid4().hex[:16]}",
                    tool_name=function_call.name,
                    args=args,
                )
            )
        elif part.text:
            texts.append(part.text)
    turn.text = "".join(texts)
    if turn.tool_calls:
        turn.finish_reason = "tool-calls"
    return turn


class GeminiLanguageModel:
    """Google Gemini behind the ``LanguageModel`` interface."""

    def __init__(self, api_key: Optional[str] = None):
        api_key = api_key or settings.gemini_api_key
        if not api_key:
            raise AIConfigurationError("Gemini API key not configured")
        genai.configure(api_key=api_key)

    def _model(self, api_identifier: str, system: Optional[str], tools: Sequence[ChatTool] = ()):
        tool_config = None
        if tools:
            tool_config = [{"function_declarations": [tool.declaration() for tool in tools]}]
        return genai.GenerativeModel(
            model_name=api_identifier,
            system_instruction=system or None,
            tools=tool_config,
            safety_settings=SAFETY_SETTINGS,
            generation_config=genai.types.GenerationConfig(
                candidate_count=1,
                max_output_tokens=settings.gemini_max_tokens,
                temperature=settings.gemini_temperature,
            ),
        )

    async def _generate(self, model, contents) -> Any:
        # The SDK call is blocking; keep it off the event loop
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, lambda: model.generate_content(contents))
        except AIServiceError:
            raise
        except Exception as e:
            logger.error(f"Gemini API call failed: {e}")
            raise map_ai_error(e) from e

    async def generate(
        self,
        model: ChatModel,
        system: str,
        messages: Sequence[CoreMessage],
        tools: Sequence[ChatTool],
    ) -> ModelTurn:
        extra_system, contents = _to_contents(messages)
        instruction = "\n\n".join([system, *extra_system])
        gemini = self._model(model.api_identifier, instruction, tools)
        response = await self._generate(gemini, contents)
        turn = _parse_response(response)
        logger.debug(
            f"Gemini step: {len(turn.text)} chars, "
            f"{len(turn.tool_calls)} tool calls, finish={turn.finish_reason}"
        )
        return turn

    async def generate_title(self, message: CoreMessage) -> str:
        gemini = self._model(settings.gemini_model, None)
        prompt = TITLE_PROMPT.format(message=message_text(message))
        try:
            response = await self._generate(gemini, prompt)
            title = " ".join(response.text.split()).strip("\"'")
        except (AIServiceError, ValueError) as e:
            logger.warning(f"Title generation failed, using message text: {e}")
            return fallback_title(message)
        return title[:TITLE_MAX_LENGTH] or fallback_title(message)


_language_model: Optional[GeminiLanguageModel] = None


def get_language_model() -> LanguageModel:
    """FastAPI dependency returning the process-wide Gemini client."""
    global _language_model
    if _language_model is None:
        _language_model = GeminiLanguageModel()
    return _language_model
