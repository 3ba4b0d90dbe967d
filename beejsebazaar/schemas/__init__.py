from .models import (
    AdvisoryRequest,
    BestPracticesRequest,
    BestPracticesResult,
    ContactRequest,
    ContactResult,
    CropSuggestionRequest,
    CurrentUser,
    DiagnosisRequest,
    DiagnosisResult,
    DiseaseAdviceRequest,
    ForecastDay,
    GenerationResult,
    HarvestPlanRequest,
    HarvestPlanResult,
    HarvestReadiness,
    HarvestTools,
    RecommendationRecord,
    ResourceOptimizationRequest,
    SecondaryCropSuggestion,
    SessionStatus,
    SmartTipsRequest,
    StructuredSection,
    TipListResult,
    WeatherAlertRequest,
    WeatherAlertResult,
    WeatherContext,
    WeatherForecast,
)

__all__ = [
    "AdvisoryRequest",
    "BestPracticesRequest",
    "BestPracticesResult",
    "ContactRequest",
    "ContactResult",
    "CropSuggestionRequest",
    "CurrentUser",
    "DiagnosisRequest",
    "DiagnosisResult",
    "DiseaseAdviceRequest",
    "ForecastDay",
    "GenerationResult",
    "HarvestPlanRequest",
    "HarvestPlanResult",
    "HarvestReadiness",
    "HarvestTools",
    "RecommendationRecord",
    "ResourceOptimizationRequest",
    "SecondaryCropSuggestion",
    "SessionStatus",
    "SmartTipsRequest",
    "StructuredSection",
    "TipListResult",
    "WeatherAlertRequest",
    "WeatherAlertResult",
    "WeatherContext",
    "WeatherForecast",
]
