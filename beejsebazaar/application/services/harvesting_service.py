from __future__ import annotations

from typing import Optional

from ...domain.harvesting import (
    analyze_crop_readiness,
    calculate_harvesting_cost,
    calculate_yield,
    get_speedup_tips,
    get_tool_recommendations,
)
from ...infra.config import AppConfig
from ...infra.weather_client import WeatherClient
from ...observability.logging_utils import log_event
from ...schemas import HarvestPlanRequest, HarvestPlanResult


class HarvestingService:
    def __init__(self, config: AppConfig, *, weather: Optional[WeatherClient] = None):
        self._config = config
        self._weather = weather or WeatherClient(config)

    def plan(self, req: HarvestPlanRequest) -> HarvestPlanResult:
        crop = req.crop.lower()
        result = HarvestPlanResult(
            crop=crop,
            farm_size=req.farm_size,
            estimated_yield_tons=calculate_yield(crop, req.farm_size),
            estimated_cost=calculate_harvesting_cost(crop, req.farm_size),
            tools=get_tool_recommendations(crop),
            speedup_tips=get_speedup_tips(crop),
        )
        if req.city:
            result.forecast = self._weather.forecast(req.city)
            result.readiness = analyze_crop_readiness(result.forecast)
        log_event(
            "harvest.plan",
            crop=crop,
            known_crop=result.tools is not None,
            readiness=result.readiness.status if result.readiness else None,
        )
        return result
