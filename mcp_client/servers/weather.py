# mcp_client/servers/weather.py
# MCP server exposing a city weather forecast backed by the Seniverse (心知天气) API.
# Tools:
#   - get-weather(city: str, days: int = 3, language: str = "zh-Hans", unit: str = "c")
#
# Run:
#   export XINGZHI_API_KEY=your_api_key_here   (or put it in .env)
#   python mcp_client/servers/weather.py        (or: python -m mcp_client.servers.weather)

import logging
import os
import sys
from typing import Annotated, Any, Dict, List, Literal, Optional

import httpx
from dotenv import load_dotenv
from mcp.server.fastmcp import FastMCP
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger("weather")

load_dotenv()

mcp = FastMCP("weather")
SENIVERSE_API_BASE = "https://api.seniverse.com/v3"
USER_AGENT = "weather-app/1.0"
API_KEY = os.getenv("XINGZHI_API_KEY", "")

Language = Literal["zh-Hans", "zh-Hant", "en", "ja"]
Unit = Literal["c", "f"]


class WeatherApiParams(BaseModel):
    """Query parameters accepted by the daily forecast endpoint."""

    key: str = Field(description="API key")
    location: str = Field(description="Location to query")
    language: Language = "zh-Hans"
    unit: Unit = "c"
    start: int = Field(default=0, ge=0, description="First day offset")
    days: Optional[int] = Field(default=None, ge=1, le=7, description="Number of days")


def build_weather_api_url(params: Dict[str, Any]) -> str:
    """Validate ``params`` and build the daily forecast URL.

    Raises ValueError when validation fails.
    """
    try:
        validated = WeatherApiParams(**params)
    except ValidationError as e:
        raise ValueError(f"Parameter validation failed: {e}") from e
    query = validated.model_dump(exclude_none=True)
    return str(httpx.URL(f"{SENIVERSE_API_BASE}/weather/daily.json", params=query))


async def make_seniverse_request(url: str) -> Optional[Dict[str, Any]]:
    headers = {
        "User-Agent": USER_AGENT,
        "Accept": "application/json",
    }
    async with httpx.AsyncClient(follow_redirects=True, timeout=30.0) as client:
        try:
            r = await client.get(url, headers=headers)
            r.raise_for_status()
            return r.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Error making Seniverse request: %s", e)
            return None


def format_daily_forecast(day: Dict[str, Any]) -> str:
    return "\n".join(
        [
            f"Date: {day.get('date', 'Unknown')}",
            f"Day: {day.get('text_day', 'n/a')} ({day.get('high', 'n/a')}°C)",
            f"Night: {day.get('text_night', 'n/a')} ({day.get('low', 'n/a')}°C)",
            f"Rainfall: {day.get('rainfall', 'n/a')}mm",
            f"Wind: {day.get('wind_direction', 'n/a')} ({day.get('wind_speed', 'n/a')}km/h)",
            f"Humidity: {day.get('humidity', 'n/a')}%",
            "---",
        ]
    )


@mcp.tool(name="get-weather", description="Get weather forecast for a city")
async def get_weather(
    city: Annotated[str, Field(description="City name (e.g. beijing, shanghai, guangzhou)")],
    days: Annotated[int, Field(ge=1, le=7, description="Number of days for forecast (1-7)")] = 3,
    language: Annotated[Language, Field(description="Language for weather description")] = "zh-Hans",
    unit: Annotated[Unit, Field(description="Temperature unit (c for Celsius, f for Fahrenheit)")] = "c",
) -> str:
    logger.debug("get-weather called: city=%s days=%s language=%s unit=%s", city, days, language, unit)
    try:
        url = build_weather_api_url(
            {"key": API_KEY, "location": city, "language": language, "unit": unit, "start": 0, "days": days}
        )
    except ValueError as e:
        return str(e)

    data = await make_seniverse_request(url)
    if not data:
        return f"Failed to fetch weather data for {city}. Check the city name and your network connection."

    results: List[Dict[str, Any]] = data.get("results") or []
    if not results:
        return f"No weather information found for {city}. Check the city name."

    result = results[0]
    location = result.get("location", {})
    daily: List[Dict[str, Any]] = result.get("daily") or []
    if not daily:
        return f"No forecast data found for {city}."

    return "\n".join(
        [
            f"📍 {location.get('name', city)} ({location.get('path', '')})",
            f"🕐 Last update: {result.get('last_update', 'unknown')}",
            f"📅 {days}-day forecast:",
            "",
            "\n".join(format_daily_forecast(d) for d in daily),
        ]
    )


def main() -> None:
    # stdout carries the protocol; logs go to stderr
    # FastMCP installs its own root handler on construction; replace it
    logging.basicConfig(
        level=logging.DEBUG if os.getenv("WEATHER_DEBUG") else logging.INFO,
        stream=sys.stderr,
        format="[%(asctime)s] %(name)s %(levelname)s %(message)s",
        force=True,
    )
    if not API_KEY:
        logger.error("XINGZHI_API_KEY is not set. Export it or add it to a .env file.")
        sys.exit(1)
    logger.info("Weather MCP Server running on stdio")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
