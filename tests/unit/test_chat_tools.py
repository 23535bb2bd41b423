"""Unit tests for tool declarations, argument handling and the active tool set."""

from typing import Optional

import httpx
import pytest
from pydantic import Field

from app.domains.chat.tools import ACTIVE_TOOLS, ALL_TOOLS, get_active_tools
from app.domains.chat.tools.activities_services import (
    ActivitiesServicesParameters,
    expand_tags,
    wants_car_rental,
)
from app.domains.chat.tools.base import ChatTool, ToolContext, ToolParameters, to_function_schema
from app.domains.chat.tools.events import events_tool
from app.domains.chat.tools.weather import weather_tool
from app.schemas.guide import GuideCategory


class EchoParameters(ToolParameters):
    word: str = Field(description="Word to echo")
    times: int = Field(default=1, ge=1, description="Repetitions")
    note: Optional[str] = Field(default=None, description="Optional note")


async def _echo(params: EchoParameters, context: ToolContext):
    if params.word == "boom":
        raise RuntimeError("exploded")
    return {"echo": params.word * params.times}


echo_tool = ChatTool(name="echo", description="Echo a word", parameters=EchoParameters, execute=_echo)


@pytest.fixture
def context():
    return ToolContext(session_factory=None)


class TestFunctionSchema:
    def test_required_defaults_and_nullable(self):
        declaration = echo_tool.declaration()
        params = declaration["parameters"]

        assert declaration["name"] == "echo"
        assert params["type"] == "OBJECT"
        assert params["required"] == ["word"]
        assert params["properties"]["word"] == {"type": "STRING", "description": "Word to echo"}
        assert params["properties"]["times"]["type"] == "INTEGER"
        assert params["properties"]["times"]["description"] == "Repetitions (default: 1)"
        assert params["properties"]["note"]["nullable"] is True

    def test_events_declaration_uses_wire_names_and_enums(self):
        properties = events_tool.declaration()["parameters"]["properties"]

        assert "timeFrame" in properties
        assert properties["timeFrame"]["enum"] == [
            "today",
            "tomorrow",
            "this week",
            "this weekend",
            "next week",
            "this month",
        ]
        assert "(default: this week)" in properties["timeFrame"]["description"]
        assert properties["tags"]["type"] == "ARRAY"
        assert properties["tags"]["items"] == {"type": "STRING"}

    def test_activities_type_is_required(self):
        params = to_function_schema(
            ActivitiesServicesParameters.model_json_schema(by_alias=True), {}
        )
        assert params["required"] == ["type"]
        assert "priceRange" in params["properties"]
        assert "featuredOnly" in params["properties"]

    def test_optional_enum_keeps_its_values(self):
        category = ALL_TOOLS["getGuides"].declaration()["parameters"]["properties"]["category"]

        assert category["type"] == "STRING"
        assert category["nullable"] is True
        assert category["enum"] == [member.value for member in GuideCategory]
        assert category["description"].startswith("Specific category of the guide")

    def test_ref_is_inlined(self):
        schema = {"$ref": "#/$defs/Point"}
        defs = {"Point": {"type": "object", "properties": {"x": {"type": "number"}}, "required": ["x"]}}

        assert to_function_schema(schema, defs) == {
            "type": "OBJECT",
            "properties": {"x": {"type": "NUMBER"}},
            "required": ["x"],
        }


class TestToolRun:
    @pytest.mark.asyncio
    async def test_valid_arguments(self, context):
        assert await echo_tool.run({"word": "yo", "times": 2}, context) == {"echo": "yoyo"}

    @pytest.mark.asyncio
    async def test_invalid_arguments_become_error_result(self, context):
        result = await echo_tool.run({"times": 0}, context)
        assert result["error"].startswith("Invalid arguments for echo")

    @pytest.mark.asyncio
    async def test_execution_failure_becomes_error_result(self, context):
        assert await echo_tool.run({"word": "boom"}, context) == {"error": "echo failed: exploded"}


class TestWeatherTool:
    @pytest.mark.asyncio
    async def test_defaults_to_island_coordinates(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.url.params)
            return httpx.Response(200, json={"current": {"temperature_2m": 31.2}})

        context = ToolContext(session_factory=None, http_transport=httpx.MockTransport(handler))
        result = await weather_tool.run({}, context)

        assert result == {"current": {"temperature_2m": 31.2}}
        assert float(seen["latitude"]) == pytest.approx(9.7313)
        assert float(seen["longitude"]) == pytest.approx(100.0137)
        assert seen["timezone"] == "auto"

    @pytest.mark.asyncio
    async def test_upstream_failure_is_reported(self):
        context = ToolContext(
            session_factory=None,
            http_transport=httpx.MockTransport(lambda request: httpx.Response(503)),
        )
        result = await weather_tool.run({"latitude": 1.0, "longitude": 2.0}, context)
        assert result["error"].startswith("getWeather failed")


class TestSearchTerms:
    def test_french_synonyms_expand_to_tags(self):
        assert expand_tags("location voiture", None) == ["car_rental", "car"]
        assert expand_tags("plongée", ["snorkel"]) == ["snorkel", "diving"]

    def test_words_match_on_boundaries(self):
        # "scar" must not count as "car"
        assert "car_rental" not in expand_tags("scar tissue", None)

    def test_car_rental_detection(self):
        assert wants_car_rental("rent a car", None, None) is True
        assert wants_car_rental(None, None, "car_rental") is True
        assert wants_car_rental("scooter", None, None) is False


def test_active_tools():
    assert ACTIVE_TOOLS == ["getWeather", "getEvents"]
    assert [tool.name for tool in get_active_tools()] == ACTIVE_TOOLS
    assert set(ALL_TOOLS) == {"getWeather", "getEvents", "getActivitiesServices", "getGuides", "getPartners"}
