"""Chat schemas: client messages, stored content blocks and chat records."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.base import BaseSchema


class MessageRole(str, Enum):
    """Message role enumeration."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    TOOL = "tool"


class CamelModel(BaseModel):
    """Model whose wire names are camelCase."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# Content blocks stored in the messages table


class TextPart(CamelModel):
    type: Literal["text"] = "text"
    text: str


class ToolCallPart(CamelModel):
    type: Literal["tool-call"] = "tool-call"
    tool_call_id: str = Field(alias="toolCallId")
    tool_name: str = Field(alias="toolName")
    args: dict[str, Any] = Field(default_factory=dict)


class ToolResultPart(CamelModel):
    type: Literal["tool-result"] = "tool-result"
    tool_call_id: str = Field(alias="toolCallId")
    tool_name: str = Field(alias="toolName")
    result: Any = None


AssistantPart = Annotated[Union[TextPart, ToolCallPart], Field(discriminator="type")]
ContentPart = Annotated[Union[TextPart, ToolCallPart, ToolResultPart], Field(discriminator="type")]


class CoreMessage(CamelModel):
    """Normalized message handed to the language model."""

    role: MessageRole
    content: Union[str, list[ContentPart]]


# Messages as sent by the web and mobile clients


class ToolInvocation(CamelModel):
    state: Literal["partial-call", "call", "result"] = "call"
    tool_call_id: str = Field(alias="toolCallId")
    tool_name: str = Field(alias="toolName")
    args: dict[str, Any] = Field(default_factory=dict)
    result: Any = None


class UIMessage(CamelModel):
    id: Optional[str] = None
    role: MessageRole
    content: Union[str, list[dict[str, Any]]] = ""
    tool_invocations: Optional[list[ToolInvocation]] = Field(default=None, alias="toolInvocations")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")


class ChatRequest(CamelModel):
    """Body of ``POST /api/chat``."""

    id: UUID = Field(..., description="Client-generated chat id (UUID string)")
    messages: list[UIMessage] = Field(default_factory=list)
    model_id: str = Field(..., alias="modelId")


class ChatResponse(BaseSchema):
    id: UUID
    user_id: UUID
    title: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class MessageResponse(BaseSchema):
    id: UUID
    chat_id: UUID
    role: MessageRole
    content: Any
    created_at: datetime


class MobileMessage(CamelModel):
    id: str
    role: MessageRole
    content: str


class MobileChatResponse(CamelModel):
    """Buffered response returned to native mobile clients."""

    messages: list[MobileMessage]


class ModelInfo(CamelModel):
    id: str
    label: str
    api_identifier: str = Field(alias="apiIdentifier")
    description: str
