from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

from ..domain.errors import UpstreamError
from ..observability.logging_utils import log_event
from ..observability.otel import record_exception, start_span
from ..schemas import ForecastDay, WeatherContext, WeatherForecast
from .config import AppConfig


def _parse_float(value: object) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _parse_timestamp(value: object) -> Optional[datetime]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return datetime.fromtimestamp(int(float(value)), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return None


def _first_condition(item: Dict[str, Any]) -> Optional[str]:
    weather = item.get("weather")
    if isinstance(weather, list) and weather and isinstance(weather[0], dict):
        return weather[0].get("description")
    return None


class WeatherClient:
    """OpenWeatherMap lookups by place name, metric units."""

    def __init__(self, config: AppConfig, *, transport: Optional[httpx.BaseTransport] = None):
        self._config = config
        self._transport = transport

    def _get(self, path: str, city: str) -> Dict[str, Any]:
        api_key = self._config.require("weather_api_key")
        url = f"{self._config.weather_api_url.rstrip('/')}/{path}"
        params = {"q": city, "appid": api_key, "units": "metric"}
        with start_span("weather.lookup", {"path": path, "city": city}) as span:
            try:
                with httpx.Client(
                    timeout=self._config.http_timeout_seconds,
                    trust_env=False,
                    transport=self._transport,
                ) as client:
                    response = client.get(url, params=params)
            except httpx.HTTPError as exc:
                record_exception(span, exc)
                raise UpstreamError(f"Failed to fetch weather: {exc}") from exc
            span.set_attribute("http.status_code", response.status_code)

        log_event("weather.response", path=path, city=city, status=response.status_code)
        if response.status_code == 404:
            raise UpstreamError(
                f'City "{city}" not found. Please check the spelling or try a nearby major city.',
                status_code=404,
                upstream_status=404,
            )
        if response.status_code == 401:
            raise UpstreamError("Invalid Weather API Key.", upstream_status=401)
        if response.is_error:
            raise UpstreamError(
                f"Failed to fetch weather: {response.reason_phrase} (Status {response.status_code})",
                upstream_status=response.status_code,
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamError("Weather service returned an unreadable response.") from exc
        if not isinstance(payload, dict):
            raise UpstreamError("Weather service returned an unexpected response.")
        return payload

    def current(self, city: str) -> WeatherContext:
        payload = self._get("weather", city)
        main = payload.get("main") or {}
        temperature = _parse_float(main.get("temp"))
        humidity = _parse_float(main.get("humidity"))
        if temperature is None or humidity is None:
            raise UpstreamError("Weather service returned an unexpected response.")
        return WeatherContext(
            temperature=temperature,
            humidity=humidity,
            condition=_first_condition(payload) or "unknown",
            city=payload.get("name") or city,
            country=(payload.get("sys") or {}).get("country"),
            feels_like=_parse_float(main.get("feels_like")),
            temperature_min=_parse_float(main.get("temp_min")),
            temperature_max=_parse_float(main.get("temp_max")),
        )

    def forecast(self, city: str, *, days: int = 7) -> WeatherForecast:
        payload = self._get("forecast", city)
        entries = payload.get("list")
        if not isinstance(entries, list):
            raise UpstreamError("Weather service returned an unexpected response.")
        forecast_days = []
        for item in entries[:days]:
            if not isinstance(item, dict):
                continue
            timestamp = _parse_timestamp(item.get("dt"))
            if timestamp is None:
                log_event("weather.forecast_entry_skipped", city=city, dt=item.get("dt"))
                continue
            main = item.get("main") or {}
            forecast_days.append(
                ForecastDay(
                    timestamp=timestamp,
                    temperature=_parse_float(main.get("temp")),
                    humidity=_parse_float(main.get("humidity")),
                    rain=bool(item.get("rain")),
                    condition=_first_condition(item),
                )
            )
        resolved = (payload.get("city") or {}).get("name") or city
        return WeatherForecast(city=resolved, days=forecast_days)
