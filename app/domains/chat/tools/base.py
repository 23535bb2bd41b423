"""Tool plumbing shared by every assistant tool.

A tool is a name, a description, a pydantic model describing its parameters
and an async ``execute``. The parameter model doubles as the contract with the
language model: its JSON schema (types, optionality, defaults, descriptions)
is rendered into a function declaration.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Awaitable, Callable, Optional, Type

import httpx
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = logging.getLogger(__name__)

_JSON_TYPES = {
    "string": "STRING",
    "number": "NUMBER",
    "integer": "INTEGER",
    "boolean": "BOOLEAN",
    "array": "ARRAY",
    "object": "OBJECT",
}


class ToolParameters(BaseModel):
    """Base class for tool parameter models; wire names are the field aliases."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


@dataclass
class ToolContext:
    """What a tool may touch while it runs."""

    session_factory: async_sessionmaker[AsyncSession]
    today: Optional[date] = None
    http_transport: Optional[httpx.AsyncBaseTransport] = None

    def current_date(self) -> date:
        return self.today or date.today()


@dataclass
class ChatTool:
    name: str
    description: str
    parameters: Type[ToolParameters]
    execute: Callable[[Any, ToolContext], Awaitable[Any]]
    tags: tuple[str, ...] = field(default_factory=tuple)

    def declaration(self) -> dict[str, Any]:
        """Function declaration in the shape the model API expects."""
        schema = self.parameters.model_json_schema(by_alias=True)
        return {
            "name": self.name,
            "description": self.description,
            "parameters": to_function_schema(schema, schema.get("$defs", {})),
        }

    async def run(self, args: dict[str, Any], context: ToolContext) -> Any:
        """
        Validate ``args`` and execute the tool.

        Failures come back as ``{"error": ...}`` so the model can tell the
        user instead of the whole completion failing.
        """
        try:
            params = self.parameters.model_validate(args or {})
        except PydanticValidationError as e:
            logger.warning(f"Tool {self.name} called with invalid arguments: {e.errors()}")
            return {"error": f"Invalid arguments for {self.name}: {e.errors(include_url=False)}"}

        try:
            return await self.execute(params, context)
        except Exception as e:
            logger.exception(f"Tool {self.name} failed")
            return {"error": f"{self.name} failed: {e}"}


def to_function_schema(schema: dict[str, Any], defs: dict[str, Any]) -> dict[str, Any]:
    """
    Reduce a pydantic JSON schema to the OpenAPI subset function calling
    accepts: upper-case types, no ``$ref``, no ``anyOf``. Optional fields are
    marked nullable and defaults are folded into the description.
    """
    if "$ref" in schema:
        ref = schema["$ref"].rsplit("/", 1)[-1]
        merged = {**defs[ref], **{k: v for k, v in schema.items() if k != "$ref"}}
        return to_function_schema(merged, defs)

    nullable = False
    if "anyOf" in schema:
        options = [option for option in schema["anyOf"] if option.get("type") != "null"]
        nullable = len(options) < len(schema["anyOf"])
        extras = {k: v for k, v in schema.items() if k != "anyOf"}
        schema = {**options[0], **extras}
        if "$ref" in schema:
            ref = schema["$ref"].rsplit("/", 1)[-1]
            schema = {**defs[ref], **{k: v for k, v in schema.items() if k != "$ref"}}

    result: dict[str, Any] = {}
    json_type = schema.get("type")
    if json_type is None and "enum" in schema:
        json_type = "string"
    if json_type is None and "const" in schema:
        json_type = "string"
        schema = {**schema, "enum": [schema["const"]]}
    result["type"] = _JSON_TYPES.get(json_type, "STRING")

    description = schema.get("description", "")
    if "default" in schema and schema["default"] is not None:
        description = f"{description} (default: {schema['default']})".strip()
    if description:
        result["description"] = description
    if nullable:
        result["nullable"] = True
    if "enum" in schema:
        result["enum"] = [str(value) for value in schema["enum"]]
        result["format"] = "enum"

    if json_type == "array" and "items" in schema:
        result["items"] = to_function_schema(schema["items"], defs)

    if json_type == "object":
        properties = schema.get("properties", {})
        result["properties"] = {
            name: to_function_schema(prop, defs) for name, prop in properties.items()
        }
        required = schema.get("required", [])
        if required:
            result["required"] = list(required)

    return result
