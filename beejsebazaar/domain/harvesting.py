from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..schemas import HarvestReadiness, HarvestTools, WeatherForecast


@dataclass
class CropHarvestProfile:
    yield_per_acre: float  # tons
    cost_per_acre: float
    equipment: List[str]
    storage: str
    speed_tips: List[str] = field(default_factory=list)


HARVEST_PROFILES: Dict[str, CropHarvestProfile] = {
    "wheat": CropHarvestProfile(
        yield_per_acre=0.5,
        cost_per_acre=1000,
        equipment=["Combine Harvester", "Grain Cart", "Truck"],
        storage="Dry, ventilated silo or warehouse",
        speed_tips=[
            "Use mechanized tools during peak dry hours",
            "Ensure equipment is well-maintained before harvest",
            "Plan your harvesting pattern to minimize turning time",
        ],
    ),
    "rice": CropHarvestProfile(
        yield_per_acre=0.8,
        cost_per_acre=1200,
        equipment=["Rice Harvester", "Sickle", "Thresher"],
        storage="Cool, moisture-free warehouse",
        speed_tips=[
            "Harvest in early morning to minimize grain losses",
            "Use proper drainage before harvesting",
            "Coordinate with labor team for efficient collection",
        ],
    ),
    "corn": CropHarvestProfile(
        yield_per_acre=0.6,
        cost_per_acre=800,
        equipment=["Corn Harvester", "Grain Cart", "Moisture Meter"],
        storage="Well-ventilated silo with temperature control",
        speed_tips=[
            "Monitor grain moisture content regularly",
            "Use proper combine settings for minimal damage",
            "Plan harvest when moisture content is optimal",
        ],
    ),
    "soybeans": CropHarvestProfile(
        yield_per_acre=0.4,
        cost_per_acre=900,
        equipment=["Combine Harvester", "Flex Header", "Grain Cart"],
        storage="Clean, dry storage with good ventilation",
        speed_tips=[
            "Wait for proper pod maturity",
            "Harvest when moisture content is 13-15%",
            "Adjust combine settings for minimal pod shattering",
        ],
    ),
}


def _profile(crop: str) -> Optional[CropHarvestProfile]:
    return HARVEST_PROFILES.get((crop or "").strip().lower())


def calculate_yield(crop: str, farm_size: float) -> float:
    profile = _profile(crop)
    if profile is None:
        return 0.0
    return profile.yield_per_acre * farm_size


def calculate_harvesting_cost(crop: str, farm_size: float) -> float:
    profile = _profile(crop)
    if profile is None:
        return 0.0
    return profile.cost_per_acre * farm_size


def get_tool_recommendations(crop: str) -> Optional[HarvestTools]:
    profile = _profile(crop)
    if profile is None:
        return None
    return HarvestTools(
        equipment=list(profile.equipment),
        storage=profile.storage,
        speed_tips=list(profile.speed_tips),
    )


def get_speedup_tips(crop: str) -> List[str]:
    profile = _profile(crop)
    return list(profile.speed_tips) if profile else []


def analyze_crop_readiness(forecast: WeatherForecast) -> HarvestReadiness:
    """Rain in the next three forecast entries means harvest early."""
    if forecast.will_rain_soon:
        return HarvestReadiness(
            status="warning",
            message="Consider early harvest - Rain expected in the next 3 days",
            recommendation="Schedule harvest as soon as possible to avoid weather damage",
        )
    return HarvestReadiness(
        status="success",
        message="Safe to harvest - Good weather expected",
        recommendation="Proceed with normal harvest schedule",
    )
