"""Models a chat request may ask for."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ChatModel:
    id: str
    label: str
    api_identifier: str
    description: str


MODELS: tuple[ChatModel, ...] = (
    ChatModel(
        id="gemini-1.5-flash",
        label="Gemini 1.5 Flash",
        api_identifier="gemini-1.5-flash",
        description="Fast answers for everyday questions",
    ),
    ChatModel(
        id="gemini-1.5-pro",
        label="Gemini 1.5 Pro",
        api_identifier="gemini-1.5-pro",
        description="Slower, for trip planning and longer answers",
    ),
)

DEFAULT_MODEL_ID = MODELS[0].id


def get_model(model_id: Optional[str]) -> Optional[ChatModel]:
    return next((model for model in MODELS if model.id == model_id), None)
