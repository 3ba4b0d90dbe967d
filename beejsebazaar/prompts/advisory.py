from __future__ import annotations

import json
from typing import List, Optional

from ..schemas import (
    BestPracticesRequest,
    CropSuggestionRequest,
    ResourceOptimizationRequest,
    SmartTipsRequest,
    WeatherContext,
)


PLAIN_TEXT_RULE = (
    "**DO NOT use any markdown formatting (like '*', '-', '_', '**', '#', etc.) "
    "or bullet point characters.**"
)

BEST_PRACTICE_HEADINGS: List[str] = [
    "Soil Selection and Preparation",
    "Sowing (Planting)",
    "Irrigation",
    "Fertilization",
    "Weed Management",
    "Pest and Disease Management",
    "Harvesting",
    "Key Tips for Success",
]
_AGE_FOCUSED = {"Irrigation", "Fertilization", "Weed Management", "Pest and Disease Management"}

RECOMMENDATION_JSON_SHAPE = """{
  "crop": "string",
  "sowing_season": "string",
  "duration": "string",
  "care_tips": ["string", "string", "string"],
  "climate": "string",
  "irrigation_needs": "string",
  "fertilizer_recommendations": "string",
  "secondary_crop_suggestion": {
    "crop": "string",
    "sowing_season": "string",
    "duration": "string"
  }
}"""

DIAGNOSIS_PROMPT = """You are an expert plant pathologist and agronomist. Analyze the uploaded image of a plant.
Instructions:
1. Health Assessment: Determine if the plant in the image appears healthy or unhealthy.
2. Identify Issue: If unhealthy, identify the most likely cause (disease, pest, nutrient deficiency, or stress).
3. Recommended Actions: Suggest actionable steps or general care tips.
Format: Use numbered headings exactly as above, each followed by its points on separate lines. Avoid markdown."""

DISEASE_ADVICE_SECTIONS: List[str] = [
    "Overview",
    "Symptoms",
    "Preventive Measures",
    "Treatment Techniques",
    "Common Medicines",
]


def _weather_line(weather: WeatherContext) -> str:
    return (
        f"{weather.temperature}°C, {weather.humidity}% humidity, "
        f"Condition: {weather.condition}"
    )


def _place(weather: WeatherContext) -> str:
    if weather.country:
        return f"{weather.city}, {weather.country}"
    return weather.city


def build_crop_suggestion_prompt(req: CropSuggestionRequest) -> str:
    farmer_data = {
        "location": req.location,
        "soil_type": req.soil_type,
        "rainfall_mm": req.rainfall,
        "preferred_total_duration_available": req.preferred_duration,
        "preferred_initial_crop": req.preferred_crop or "None",
        "planned_sowing_month": req.sowing_month,
        "available_water_sources": ", ".join(req.water_sources)
        if req.water_sources
        else "Not specified, assume primarily Rainfed",
    }
    if req.farm_size is not None:
        farmer_data["farm_size_acres"] = req.farm_size
    return f"""You are an expert agricultural assistant AI specializing in crop planning for specific regional conditions. Analyze the farmer data and recommend the most suitable primary crop and, only if viable, a sequential secondary crop.

Farmer's Input Data:
{json.dumps(farmer_data, indent=2, ensure_ascii=False)}

Instructions:
1. Primary crop: choose the best crop for the location, soil type, rainfall, water sources and planned sowing month. Recommend the preferred crop only if it genuinely suits all of these conditions. Give a realistic duration, the sowing season (Kharif, Rabi, Zaid, ...), 3-5 concise care tips, the suitable climate, irrigation needs considering rainfall and water sources, and brief fertilizer recommendations.
2. Secondary crop: take the upper end of the primary crop duration and subtract it from the total duration available. Only if more than about 75 days remain AND a different crop fits the planting window right after the primary harvest, add "secondary_crop_suggestion" with its crop, sowing_season and duration. Otherwise omit that key entirely.
3. Output ONLY one raw, valid JSON object with the structure below. No introductory text, explanations or markdown fences.

Required Output JSON Structure:
{RECOMMENDATION_JSON_SHAPE}
"""


def build_best_practices_prompt(req: BestPracticesRequest) -> str:
    age = req.crop_age_days
    blocks = []
    for idx, heading in enumerate(BEST_PRACTICE_HEADINGS, start=1):
        hint = f" (Focus on needs at {age} days)" if heading in _AGE_FOCUSED else ""
        blocks.append(f"{idx}. {heading}\nPoint 1 text{hint}\nPoint 2 text\n...")
    structure = "\n".join(blocks)
    return f"""You are an agricultural expert providing practical guidance.
Generate detailed best farming practices for growing "{req.crop}", specifically considering the crop is currently {age} days old.
Strictly follow this structure, using these exact numbered headings.
Under each heading, provide individual points of advice. Each point should be on a new line.
{PLAIN_TEXT_RULE}

{structure}

Ensure the advice under Irrigation, Fertilization, Weed Management, and Pest/Disease Management is particularly relevant to the crop's current age ({age} days). Be precise, practical, and farmer-friendly. Output only the structured text as requested."""


def build_smart_tips_prompt(req: SmartTipsRequest, weather: WeatherContext) -> str:
    if req.specific_issue:
        focus = f'Specific problem described: "{req.specific_issue}". Address this primarily.'
    else:
        focus = "Provide general tips for the selected category."
    return f"""Act as an expert agricultural advisor.
A farmer is growing "{req.crop}" in {_place(weather)}.
The farmer needs advice specifically about "{req.category}".
{focus}
Current weather conditions: {_weather_line(weather)}. Consider how this weather impacts the advice for "{req.category}".

Task: Provide a list of concise, actionable farming tips relevant to the category, specific issue (if any), crop, location, and current weather.

Output Format Rules:
1. Each distinct tip MUST be on a new line.
2. {PLAIN_TEXT_RULE}
3. Output only the tips, starting directly with the first tip."""


def build_resource_optimization_prompt(
    req: ResourceOptimizationRequest, weather: WeatherContext, *, max_points: int = 8
) -> str:
    resources = (
        ", ".join(req.resources)
        if req.resources
        else "Limited resources specified (assume basic availability)"
    )
    return f"""Act as an agricultural optimization expert.
A farmer is growing "{req.crop}" in {_place(weather)}.
Current weather: {_weather_line(weather)}.
Available resources: {resources}.

Provide practical, actionable suggestions for optimizing the listed resources (or general resources if none listed). Include alternatives for limited resources and tips to improve yield considering the current weather.

Output Format Rules:
- Each suggestion MUST be on a new line.
- {PLAIN_TEXT_RULE}
- Give at most {max_points} points.
Begin the suggestions directly."""


def build_weather_alert_prompt(crop: str, weather: WeatherContext, days: int = 7) -> str:
    feels_like: Optional[str] = None
    if weather.feels_like is not None:
        feels_like = f"Feels Like: {weather.feels_like}°C\n"
    lines = "\n".join(f"Day {n}: ..." for n in range(1, days + 1))
    return f"""You are an agricultural assistant. A farmer is growing {crop} in {weather.city}.
Here is the current weather:
Temperature: {weather.temperature}°C
{feels_like or ""}Humidity: {weather.humidity}%
Weather Description: {weather.condition}

Generate a {days}-day forecast prediction with short, actionable crop-specific suggestions in plain text. Avoid any markdown formatting. Use this format:
{lines}"""


def build_disease_advice_prompt(disease: str) -> str:
    headings = "\n".join(
        f"{idx}. {title}" for idx, title in enumerate(DISEASE_ADVICE_SECTIONS, start=1)
    )
    return f"""The detected crop disease is: {disease}.
Provide the following in plain text, using exactly these numbered headings, each on its own line followed by its points on separate lines:
{headings}
{PLAIN_TEXT_RULE}"""
