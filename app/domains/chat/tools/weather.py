"""Forecast for the island from Open-Meteo."""

import logging
from typing import Any

import httpx
from pydantic import Field

from app.core.config import settings
from app.domains.chat.tools.base import ChatTool, ToolContext, ToolParameters

logger = logging.getLogger(__name__)

CURRENT_FIELDS = (
    "temperature_2m,relative_humidity_2m,precipitation,weather_code,"
    "cloud_cover,wind_speed_10m,wind_direction_10m"
)
HOURLY_FIELDS = "temperature_2m,precipitation_probability"
DAILY_FIELDS = "sunrise,sunset,uv_index_max"


class WeatherParameters(ToolParameters):
    latitude: float = Field(
        default=settings.weather_latitude,
        description="Latitude for Koh Phangan",
    )
    longitude: float = Field(
        default=settings.weather_longitude,
        description="Longitude for Koh Phangan",
    )


async def get_weather(params: WeatherParameters, context: ToolContext) -> dict[str, Any]:
    query = {
        "latitude": params.latitude,
        "longitude": params.longitude,
        "current": CURRENT_FIELDS,
        "hourly": HOURLY_FIELDS,
        "daily": DAILY_FIELDS,
        "timezone": "auto",
    }
    async with httpx.AsyncClient(
        transport=context.http_transport, timeout=settings.weather_timeout
    ) as client:
        response = await client.get(settings.weather_api_url, params=query)
        response.raise_for_status()
        logger.debug(f"Weather fetched for {params.latitude},{params.longitude}")
        return response.json()


weather_tool = ChatTool(
    name="getWeather",
    description="Get the current weather at Koh Phangan",
    parameters=WeatherParameters,
    execute=get_weather,
)
