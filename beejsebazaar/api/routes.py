from __future__ import annotations

from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Header

from ..application.services import (
    BestPracticesService,
    ContactService,
    CropSuggestionService,
    DiagnosisService,
    HarvestingService,
    ResourceOptimizerService,
    SessionService,
    SmartTipsService,
    WeatherAlertService,
)
from ..domain.catalog import build_catalog
from ..domain.harvesting import HARVEST_PROFILES
from ..infra.config import AppConfig, get_config
from ..schemas import (
    BestPracticesRequest,
    BestPracticesResult,
    ContactRequest,
    ContactResult,
    CropSuggestionRequest,
    DiagnosisRequest,
    DiagnosisResult,
    DiseaseAdviceRequest,
    HarvestPlanRequest,
    HarvestPlanResult,
    RecommendationRecord,
    ResourceOptimizationRequest,
    SessionStatus,
    SmartTipsRequest,
    TipListResult,
    WeatherAlertRequest,
    WeatherAlertResult,
)


router = APIRouter(prefix="/api/v1")


def get_crop_suggestion_service(cfg: AppConfig = Depends(get_config)) -> CropSuggestionService:
    return CropSuggestionService(cfg)


def get_best_practices_service(cfg: AppConfig = Depends(get_config)) -> BestPracticesService:
    return BestPracticesService(cfg)


def get_smart_tips_service(cfg: AppConfig = Depends(get_config)) -> SmartTipsService:
    return SmartTipsService(cfg)


def get_resource_optimizer_service(
    cfg: AppConfig = Depends(get_config),
) -> ResourceOptimizerService:
    return ResourceOptimizerService(cfg)


def get_weather_alert_service(cfg: AppConfig = Depends(get_config)) -> WeatherAlertService:
    return WeatherAlertService(cfg)


def get_diagnosis_service(cfg: AppConfig = Depends(get_config)) -> DiagnosisService:
    return DiagnosisService(cfg)


def get_harvesting_service(cfg: AppConfig = Depends(get_config)) -> HarvestingService:
    return HarvestingService(cfg)


def get_contact_service(cfg: AppConfig = Depends(get_config)) -> ContactService:
    return ContactService(cfg)


def get_session_service(cfg: AppConfig = Depends(get_config)) -> SessionService:
    return SessionService(cfg)


@router.post("/crop-suggestion", response_model=RecommendationRecord)
def crop_suggestion(
    request: CropSuggestionRequest,
    service: CropSuggestionService = Depends(get_crop_suggestion_service),
):
    return service.suggest(request)


@router.post("/best-practices", response_model=BestPracticesResult)
def best_practices(
    request: BestPracticesRequest,
    service: BestPracticesService = Depends(get_best_practices_service),
):
    return service.fetch(request)


@router.post("/smart-tips", response_model=TipListResult)
def smart_tips(
    request: SmartTipsRequest,
    service: SmartTipsService = Depends(get_smart_tips_service),
):
    return service.tips(request)


@router.post("/resource-optimizer", response_model=TipListResult)
def resource_optimizer(
    request: ResourceOptimizationRequest,
    service: ResourceOptimizerService = Depends(get_resource_optimizer_service),
):
    return service.optimize(request)


@router.post("/weather-alert", response_model=WeatherAlertResult)
def weather_alert(
    request: WeatherAlertRequest,
    service: WeatherAlertService = Depends(get_weather_alert_service),
):
    return service.alert(request)


@router.post("/diagnosis", response_model=DiagnosisResult)
def diagnosis(
    request: DiagnosisRequest,
    service: DiagnosisService = Depends(get_diagnosis_service),
):
    return service.diagnose(request)


@router.post("/disease-advice", response_model=DiagnosisResult)
def disease_advice(
    request: DiseaseAdviceRequest,
    service: DiagnosisService = Depends(get_diagnosis_service),
):
    return service.advise(request)


@router.post("/harvest/plan", response_model=HarvestPlanResult)
def harvest_plan(
    request: HarvestPlanRequest,
    service: HarvestingService = Depends(get_harvesting_service),
):
    return service.plan(request)


@router.post("/contact", response_model=ContactResult)
def contact(
    request: ContactRequest,
    service: ContactService = Depends(get_contact_service),
):
    return service.send(request)


@router.get("/session", response_model=SessionStatus)
def session(
    x_session_id: Optional[str] = Header(default=None),
    service: SessionService = Depends(get_session_service),
):
    return service.whoami(x_session_id)


@router.post("/session/sign-out", response_model=SessionStatus)
def sign_out(
    x_session_id: Optional[str] = Header(default=None),
    service: SessionService = Depends(get_session_service),
):
    if not x_session_id:
        return SessionStatus(signed_in=False)
    return service.sign_out(x_session_id)


@router.get("/catalog")
def catalog() -> Dict[str, List[str]]:
    return build_catalog(sorted(HARVEST_PROFILES))
