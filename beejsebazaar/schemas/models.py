from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator


_SENTINEL_KEYS = ("error", "error_kind")


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


class AdvisoryRequest(BaseModel):
    """Base for user-submitted forms; only required presence is checked."""

    model_config = ConfigDict(str_strip_whitespace=True)


class StructuredSection(BaseModel):
    """A titled group of advice points parsed from a numbered-heading reply."""

    title: str
    points: List[str] = Field(default_factory=list)


class SecondaryCropSuggestion(BaseModel):
    """Optional follow-up crop that fits the remaining season."""

    model_config = ConfigDict(extra="allow")

    crop: str = ""
    sowing_season: str = ""
    duration: str = ""

    @field_validator("crop", "sowing_season", "duration", mode="before")
    @classmethod
    def _coerce_text(cls, v):
        return _as_text(v)

    @property
    def is_complete(self) -> bool:
        return bool(self.crop and self.sowing_season and self.duration)


class RecommendationRecord(BaseModel):
    """
    Crop recommendation recovered from a JSON reply.

    The typed fields are the renderer's view: missing keys fall back to empty
    values so no page dereferences an absent field. The reply object itself is
    kept verbatim and returned by ``to_payload()``. ``error``/``error_kind``
    are only ever set by ``sentinel()``; same-named keys in a reply stay in
    the payload and never mark the record as failed.
    """

    model_config = ConfigDict(extra="allow")

    crop: str = ""
    sowing_season: str = ""
    duration: str = ""
    care_tips: List[str] = Field(default_factory=list)
    climate: str = ""
    irrigation_needs: str = ""
    fertilizer_recommendations: str = ""
    secondary_crop_suggestion: Optional[SecondaryCropSuggestion] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None

    _reply: Optional[Dict[str, Any]] = PrivateAttr(default=None)

    @field_validator(
        "crop",
        "sowing_season",
        "duration",
        "climate",
        "irrigation_needs",
        "fertilizer_recommendations",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, v):
        return _as_text(v)

    @field_validator("care_tips", mode="before")
    @classmethod
    def _coerce_tips(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [v] if v.strip() else []
        if isinstance(v, (list, tuple)):
            return [_as_text(item) for item in v]
        return [_as_text(v)]

    @field_validator("secondary_crop_suggestion", mode="before")
    @classmethod
    def _drop_non_object(cls, v):
        return v if isinstance(v, (dict, SecondaryCropSuggestion)) else None

    @classmethod
    def from_reply(cls, parsed: Dict[str, Any]) -> "RecommendationRecord":
        view = {key: value for key, value in parsed.items() if key not in _SENTINEL_KEYS}
        record = cls.model_validate(view)
        record._reply = parsed
        return record

    @classmethod
    def sentinel(cls, message: str, *, kind: str) -> "RecommendationRecord":
        return cls(error=message, error_kind=kind)

    @property
    def is_error(self) -> bool:
        return self._reply is None and self.error is not None

    def to_payload(self) -> Dict[str, Any]:
        """The reply object as parsed, or the sentinel's error fields."""
        if self._reply is not None:
            return dict(self._reply)
        return self.model_dump(exclude_unset=True)


class WeatherContext(BaseModel):
    """Current conditions used as prompt context and shown verbatim."""

    temperature: float
    humidity: float
    condition: str = Field(..., description="Provider condition text, e.g. 'light rain'.")
    city: str = Field(..., description="City name as resolved by the provider.")
    country: Optional[str] = None
    feels_like: Optional[float] = None
    temperature_min: Optional[float] = None
    temperature_max: Optional[float] = None


class ForecastDay(BaseModel):
    timestamp: datetime
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    rain: bool = False
    condition: Optional[str] = None


class WeatherForecast(BaseModel):
    city: str
    days: List[ForecastDay] = Field(default_factory=list)

    @property
    def will_rain_soon(self) -> bool:
        return any(day.rain for day in self.days[:3])


class GenerationResult(BaseModel):
    """What the core reads back from one generation call."""

    text: str = ""
    finish_reason: Optional[str] = None
    block_reason: Optional[str] = None
    model: Optional[str] = None


class CurrentUser(BaseModel):
    user_id: str
    first_name: Optional[str] = None


# ---- requests ----


class CropSuggestionRequest(AdvisoryRequest):
    location: str = Field(..., min_length=1, examples=["Pune District, Maharashtra"])
    soil_type: str = Field(..., min_length=1, examples=["Loamy"])
    rainfall: float = Field(..., ge=0, description="Average annual rainfall in mm.")
    preferred_duration: str = Field(
        ..., min_length=1, description="Total time available, e.g. '180 days'."
    )
    preferred_crop: Optional[str] = None
    sowing_month: str = Field(..., min_length=1, examples=["June"])
    water_sources: List[str] = Field(default_factory=list)
    farm_size: Optional[float] = Field(default=None, ge=0, description="Acres.")


class BestPracticesRequest(AdvisoryRequest):
    crop: str = Field(..., min_length=1)
    crop_age_days: int = Field(..., ge=0)


class SmartTipsRequest(AdvisoryRequest):
    crop: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    specific_issue: Optional[str] = None


class ResourceOptimizationRequest(AdvisoryRequest):
    crop: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    resources: List[str] = Field(default_factory=list)


class WeatherAlertRequest(AdvisoryRequest):
    crop: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)


class DiagnosisRequest(AdvisoryRequest):
    image_base64: str = Field(
        ..., min_length=1, description="Raw base64 or a data: URL."
    )
    mime_type: Optional[str] = Field(
        default=None, description="Required unless image_base64 is a data URL."
    )


class DiseaseAdviceRequest(AdvisoryRequest):
    disease: str = Field(..., min_length=1)


class HarvestPlanRequest(AdvisoryRequest):
    crop: str = Field(..., min_length=1, examples=["wheat"])
    farm_size: float = Field(..., ge=0, description="Acres.")
    city: Optional[str] = None


class ContactRequest(AdvisoryRequest):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    message: str = Field(..., min_length=1)


# ---- results ----


class BestPracticesResult(BaseModel):
    crop: str
    crop_age_days: int
    sections: List[StructuredSection] = Field(default_factory=list)
    raw: str = ""


class TipListResult(BaseModel):
    """Tips or resource suggestions, with the weather they were based on."""

    weather: WeatherContext
    items: List[str] = Field(default_factory=list)
    notice: Optional[str] = None


class WeatherAlertResult(BaseModel):
    weather: WeatherContext
    days: List[str] = Field(default_factory=list)
    formatted: str = ""


class DiagnosisResult(BaseModel):
    sections: List[StructuredSection] = Field(default_factory=list)
    raw: str = ""
    disease: Optional[str] = None


class HarvestReadiness(BaseModel):
    status: Literal["warning", "success"]
    message: str
    recommendation: str


class HarvestTools(BaseModel):
    equipment: List[str] = Field(default_factory=list)
    storage: str = ""
    speed_tips: List[str] = Field(default_factory=list)


class HarvestPlanResult(BaseModel):
    crop: str
    farm_size: float
    estimated_yield_tons: float
    estimated_cost: float
    tools: Optional[HarvestTools] = None
    speedup_tips: List[str] = Field(default_factory=list)
    forecast: Optional[WeatherForecast] = None
    readiness: Optional[HarvestReadiness] = None


class ContactResult(BaseModel):
    status_code: int
    message: str


class SessionStatus(BaseModel):
    signed_in: bool
    first_name: Optional[str] = None
