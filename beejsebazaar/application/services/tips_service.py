from __future__ import annotations

from typing import Optional

from ...domain.structuring import parse_lines
from ...infra.config import AppConfig
from ...infra.generation import GenerationClient
from ...infra.weather_client import WeatherClient
from ...observability.logging_utils import log_event
from ...prompts.advisory import build_resource_optimization_prompt, build_smart_tips_prompt
from ...schemas import (
    ResourceOptimizationRequest,
    SmartTipsRequest,
    TipListResult,
    WeatherContext,
)
from .common import ensure_reply


class _WeatherAwareListService:
    """Fetch current weather, prompt with it, split the reply one item per line."""

    event_name = "tips"
    empty_message = "No tips were generated by the AI for this request."

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

    def _run(self, city: str, build_prompt) -> TipListResult:
        self._config.require("gemini_api_key")
        self._config.require("weather_api_key")
        weather: WeatherContext = self._weather.current(city)
        result = self._generator.generate(build_prompt(weather))
        reply = ensure_reply(result, empty_message=self.empty_message)
        items = parse_lines(reply)
        log_event(f"{self.event_name}.done", city=weather.city, items=len(items))
        return TipListResult(weather=weather, items=items)


class SmartTipsService(_WeatherAwareListService):
    event_name = "smart_tips"

    def tips(self, req: SmartTipsRequest) -> TipListResult:
        return self._run(req.city, lambda weather: build_smart_tips_prompt(req, weather))


class ResourceOptimizerService(_WeatherAwareListService):
    event_name = "resource_optimizer"
    empty_message = "No suggestions were generated by the AI."

    def optimize(self, req: ResourceOptimizationRequest) -> TipListResult:
        result = self._run(
            req.city, lambda weather: build_resource_optimization_prompt(req, weather)
        )
        if not req.resources:
            result.notice = "No resources selected; suggestions assume basic availability."
        return result
