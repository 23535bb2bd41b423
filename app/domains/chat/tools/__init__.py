"""Tools the assistant can call during a completion."""

from app.domains.chat.tools.activities_services import activities_services_tool
from app.domains.chat.tools.base import ChatTool, ToolContext
from app.domains.chat.tools.events import events_tool
from app.domains.chat.tools.guides import guides_tool
from app.domains.chat.tools.partners import partners_tool
from app.domains.chat.tools.weather import weather_tool

ALL_TOOLS: dict[str, ChatTool] = {
    tool.name: tool
    for tool in (weather_tool, events_tool, activities_services_tool, guides_tool, partners_tool)
}

# Tools offered to the model on the chat route
ACTIVE_TOOLS = ["getWeather", "getEvents"]


def get_active_tools() -> list[ChatTool]:
    return [ALL_TOOLS[name] for name in ACTIVE_TOOLS]


__all__ = ["ALL_TOOLS", "ACTIVE_TOOLS", "ChatTool", "ToolContext", "get_active_tools"]
