from __future__ import annotations

from typing import Optional

from ...domain.structuring import format_day_blocks, split_day_blocks, strip_markdown
from ...infra.config import AppConfig
from ...infra.generation import GenerationClient
from ...infra.weather_client import WeatherClient
from ...observability.logging_utils import log_event
from ...prompts.advisory import build_weather_alert_prompt
from ...schemas import WeatherAlertRequest, WeatherAlertResult
from .common import raise_for_stop


NO_ALERT_MESSAGE = "No alert generated."
FORECAST_DAYS = 7


class WeatherAlertService:
    """Weather-linked crop alerts, one block per forecast day."""

    def __init__(
        self,
        config: AppConfig,
        *,
        generator: Optional[GenerationClient] = None,
        weather: Optional[WeatherClient] = None,
    ):
        self._config = config
        self._generator = generator or GenerationClient(config)
        self._weather = weather or WeatherClient(config)

    def alert(self, req: WeatherAlertRequest) -> WeatherAlertResult:
        self._config.require("gemini_api_key")
        weather = self._weather.current(req.city)
        result = self._generator.generate(
            build_weather_alert_prompt(req.crop, weather, days=FORECAST_DAYS)
        )
        raise_for_stop(result)
        cleaned = strip_markdown(result.text)
        days = split_day_blocks(cleaned)
        if len(days) != FORECAST_DAYS:
            log_event("weather_alert.day_count", expected=FORECAST_DAYS, actual=len(days))
        formatted = format_day_blocks(cleaned) or NO_ALERT_MESSAGE
        return WeatherAlertResult(weather=weather, days=days, formatted=formatted)
