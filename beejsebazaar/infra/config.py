from functools import lru_cache
from typing import Dict, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.errors import MissingCredentialError


# field name -> (env var, human label)
CREDENTIAL_FIELDS: Dict[str, tuple] = {
    "gemini_api_key": ("GEMINI_API_KEY", "Gemini API Key"),
    "weather_api_key": ("WEATHER_API_KEY", "Weather API Key"),
    "emailjs_service_id": ("EMAILJS_SERVICE_ID", "EmailJS service id"),
    "emailjs_template_id": ("EMAILJS_TEMPLATE_ID", "EmailJS template id"),
    "emailjs_public_key": ("EMAILJS_PUBLIC_KEY", "EmailJS public key"),
    "clerk_secret_key": ("CLERK_SECRET_KEY", "Clerk secret key"),
}


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    gemini_api_key: Optional[str] = Field(default=None, validation_alias="GEMINI_API_KEY")
    generation_api_base: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta/openai/",
        validation_alias="GENERATION_API_BASE",
    )
    generation_model: str = Field(
        default="gemini-2.0-flash", validation_alias="GENERATION_MODEL"
    )
    vision_model: str = Field(default="gemini-2.0-flash", validation_alias="VISION_MODEL")
    generation_temperature: float = Field(
        default=0.7, validation_alias="GENERATION_TEMPERATURE"
    )

    weather_api_key: Optional[str] = Field(default=None, validation_alias="WEATHER_API_KEY")
    weather_api_url: str = Field(
        default="https://api.openweathermap.org/data/2.5",
        validation_alias="WEATHER_API_URL",
    )

    emailjs_service_id: Optional[str] = Field(
        default=None, validation_alias="EMAILJS_SERVICE_ID"
    )
    emailjs_template_id: Optional[str] = Field(
        default=None, validation_alias="EMAILJS_TEMPLATE_ID"
    )
    emailjs_public_key: Optional[str] = Field(
        default=None, validation_alias="EMAILJS_PUBLIC_KEY"
    )
    emailjs_api_url: str = Field(
        default="https://api.emailjs.com/api/v1.0/email/send",
        validation_alias="EMAILJS_API_URL",
    )
    contact_recipient_name: str = Field(
        default="BeejSeBazaar Team", validation_alias="CONTACT_RECIPIENT_NAME"
    )

    clerk_secret_key: Optional[str] = Field(
        default=None, validation_alias="CLERK_SECRET_KEY"
    )
    clerk_api_url: str = Field(
        default="https://api.clerk.com/v1", validation_alias="CLERK_API_URL"
    )

    http_timeout_seconds: float = Field(
        default=15.0, validation_alias="HTTP_TIMEOUT_SECONDS"
    )
    cors_allow_origins: str = Field(default="*", validation_alias="CORS_ALLOW_ORIGINS")
    log_path: Optional[str] = Field(default=None, validation_alias="LOG_PATH")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    fastapi_port: int = Field(default=8000, validation_alias="FASTAPI_PORT")

    @field_validator(*CREDENTIAL_FIELDS, "log_path", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value.strip() if isinstance(value, str) else value

    @property
    def cors_origins(self) -> List[str]:
        return [item.strip() for item in self.cors_allow_origins.split(",") if item.strip()]

    def require(self, field: str) -> str:
        """Return a credential or raise before any request is attempted."""
        value = getattr(self, field)
        if not value:
            env_var, label = CREDENTIAL_FIELDS[field]
            raise MissingCredentialError(env_var, label)
        return value

    def missing_credentials(self) -> List[str]:
        return [
            env_var
            for field, (env_var, _) in CREDENTIAL_FIELDS.items()
            if not getattr(self, field)
        ]


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    return AppConfig()
