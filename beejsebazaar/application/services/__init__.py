from .best_practices_service import BestPracticesService
from .contact_service import ContactService
from .crop_suggestion_service import CropSuggestionService
from .diagnosis_service import DiagnosisService
from .harvesting_service import HarvestingService
from .session_service import SessionService
from .tips_service import ResourceOptimizerService, SmartTipsService
from .weather_alert_service import WeatherAlertService

__all__ = [
    "BestPracticesService",
    "ContactService",
    "CropSuggestionService",
    "DiagnosisService",
    "HarvestingService",
    "ResourceOptimizerService",
    "SessionService",
    "SmartTipsService",
    "WeatherAlertService",
]
