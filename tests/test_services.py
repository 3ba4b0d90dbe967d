import importlib.util
import json
import sys
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import patch

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

_MISSING_PYDANTIC_SETTINGS = importlib.util.find_spec("pydantic_settings") is None

if not _MISSING_PYDANTIC_SETTINGS:
    from beejsebazaar.application.services import (
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
    from beejsebazaar.application.services.weather_alert_service import NO_ALERT_MESSAGE
    from beejsebazaar.domain.errors import (
        GenerationRefusedError,
        InvalidInputError,
        MissingCredentialError,
        UpstreamError,
    )
    from beejsebazaar.infra.config import AppConfig
    from beejsebazaar.schemas import (
        BestPracticesRequest,
        ContactRequest,
        CropSuggestionRequest,
        CurrentUser,
        DiagnosisRequest,
        DiseaseAdviceRequest,
        ForecastDay,
        GenerationResult,
        HarvestPlanRequest,
        ResourceOptimizationRequest,
        SmartTipsRequest,
        WeatherAlertRequest,
        WeatherContext,
        WeatherForecast,
    )


def _config(**overrides):
    values = {
        "GEMINI_API_KEY": "gemini-test",
        "WEATHER_API_KEY": "weather-test",
        "EMAILJS_SERVICE_ID": "",
        "EMAILJS_TEMPLATE_ID": "",
        "EMAILJS_PUBLIC_KEY": "",
        "CLERK_SECRET_KEY": "",
    }
    values.update(overrides)
    return AppConfig(_env_file=None, **values)


class _FakeGenerator:
    def __init__(self, text="", finish_reason="STOP", block_reason=None, exc=None):
        self.result = GenerationResult(
            text=text, finish_reason=finish_reason, block_reason=block_reason
        )
        self.exc = exc
        self.calls = []

    def generate(self, prompt, *, image=None):
        self.calls.append((prompt, image))
        if self.exc is not None:
            raise self.exc
        return self.result


class _FakeWeather:
    def __init__(self, context=None, forecast=None, exc=None):
        self.context = context
        self.forecast_value = forecast
        self.exc = exc
        self.cities = []

    def current(self, city):
        self.cities.append(city)
        if self.exc is not None:
            raise self.exc
        return self.context

    def forecast(self, city, *, days=7):
        self.cities.append(city)
        return self.forecast_value


def _pune_weather():
    return WeatherContext(temperature=29.5, humidity=70, condition="light rain", city="Pune")


def _forecast(rain_days):
    start = datetime(2026, 6, 1, tzinfo=timezone.utc)
    return WeatherForecast(
        city="Pune",
        days=[
            ForecastDay(timestamp=start + timedelta(hours=3 * i), rain=i in rain_days)
            for i in range(7)
        ],
    )


@unittest.skipUnless(
    not _MISSING_PYDANTIC_SETTINGS, "pydantic_settings is not installed"
)
class CropSuggestionServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.req = CropSuggestionRequest(
            location="Pune District, Maharashtra",
            soil_type="Loamy",
            rainfall=700,
            preferred_duration="180 days",
            sowing_month="June",
            water_sources=["Canal", "Borewell"],
        )

    def test_fenced_reply_becomes_record(self) -> None:
        payload = {
            "crop": "Soybean",
            "sowing_season": "Kharif",
            "duration": "95 days",
            "care_tips": ["Treat seed"],
            "secondary_crop_suggestion": {
                "crop": "Chickpea",
                "sowing_season": "Rabi",
                "duration": "100 days",
            },
        }
        generator = _FakeGenerator(text=f"```json\n{json.dumps(payload)}\n```")
        record = CropSuggestionService(_config(), generator=generator).suggest(self.req)

        self.assertFalse(record.is_error)
        self.assertEqual(record.to_payload(), payload)
        prompt, image = generator.calls[0]
        self.assertIsNone(image)
        self.assertIn("Pune District, Maharashtra", prompt)
        self.assertIn("Loamy", prompt)
        self.assertIn("June", prompt)

    def test_blocked_empty_reply_is_sentinel(self) -> None:
        generator = _FakeGenerator(text="", finish_reason="SAFETY")
        record = CropSuggestionService(_config(), generator=generator).suggest(self.req)
        self.assertTrue(record.is_error)
        self.assertEqual(record.error_kind, "blocked")

    def test_refusal_from_endpoint_is_sentinel(self) -> None:
        generator = _FakeGenerator(
            exc=GenerationRefusedError("Gemini request blocked: SAFETY.", kind="blocked")
        )
        record = CropSuggestionService(_config(), generator=generator).suggest(self.req)
        self.assertEqual(record.error_kind, "blocked")
        self.assertEqual(record.crop, "")

    def test_prose_reply_is_sentinel(self) -> None:
        generator = _FakeGenerator(text="Wheat would be a good choice.")
        record = CropSuggestionService(_config(), generator=generator).suggest(self.req)
        self.assertEqual(record.error_kind, "no_json_found")

    def test_incomplete_secondary_is_kept(self) -> None:
        generator = _FakeGenerator(
            text='{"crop": "Rice", "secondary_crop_suggestion": {"crop": "Mustard"}}'
        )
        with patch(
            "beejsebazaar.application.services.crop_suggestion_service.log_event"
        ) as log:
            record = CropSuggestionService(_config(), generator=generator).suggest(self.req)
        self.assertEqual(record.secondary_crop_suggestion.crop, "Mustard")
        self.assertFalse(record.secondary_crop_suggestion.is_complete)
        events = [call.args[0] for call in log.call_args_list]
        self.assertIn("crop_suggestion.incomplete_secondary", events)

    def test_upstream_errors_propagate(self) -> None:
        generator = _FakeGenerator(exc=UpstreamError("Invalid Gemini API Key."))
        with self.assertRaises(UpstreamError):
            CropSuggestionService(_config(), generator=generator).suggest(self.req)


@unittest.skipUnless(
    not _MISSING_PYDANTIC_SETTINGS, "pydantic_settings is not installed"
)
class BestPracticesServiceTests(unittest.TestCase):
    def test_sections_are_parsed(self) -> None:
        generator = _FakeGenerator(
            text="1. Irrigation\nWater daily\n2. Pest Control\n- Inspect leaves"
        )
        result = BestPracticesService(_config(), generator=generator).fetch(
            BestPracticesRequest(crop="Tomato", crop_age_days=30)
        )
        self.assertEqual([s.title for s in result.sections], ["Irrigation", "Pest Control"])
        self.assertEqual(result.sections[1].points, ["Inspect leaves"])
        self.assertEqual(result.crop_age_days, 30)
        self.assertIn("Tomato", generator.calls[0][0])
        self.assertIn("30", generator.calls[0][0])

    def test_blocked_reply_raises(self) -> None:
        generator = _FakeGenerator(text="", finish_reason="SAFETY")
        with self.assertRaises(GenerationRefusedError) as ctx:
            BestPracticesService(_config(), generator=generator).fetch(
                BestPracticesRequest(crop="Tomato", crop_age_days=30)
            )
        self.assertEqual(ctx.exception.kind, "blocked")
        self.assertEqual(ctx.exception.status_code, 422)

    def test_empty_reply_raises(self) -> None:
        generator = _FakeGenerator(text="  ")
        with self.assertRaises(GenerationRefusedError) as ctx:
            BestPracticesService(_config(), generator=generator).fetch(
                BestPracticesRequest(crop="Tomato", crop_age_days=30)
            )
        self.assertEqual(ctx.exception.kind, "empty_reply")


@unittest.skipUnless(
    not _MISSING_PYDANTIC_SETTINGS, "pydantic_settings is not installed"
)
class TipListServiceTests(unittest.TestCase):
    def test_tips_use_current_weather(self) -> None:
        generator = _FakeGenerator(text="Check soil moisture\n\n  Mulch beds \n")
        weather = _FakeWeather(context=_pune_weather())
        result = SmartTipsService(_config(), generator=generator, weather=weather).tips(
            SmartTipsRequest(crop="Wheat", city="Pune", category="Irrigation")
        )
        self.assertEqual(result.items, ["Check soil moisture", "Mulch beds"])
        self.assertEqual(result.weather.city, "Pune")
        self.assertEqual(weather.cities, ["Pune"])
        prompt = generator.calls[0][0]
        self.assertIn("light rain", prompt)
        self.assertIn("Irrigation", prompt)

    def test_missing_generation_key_stops_before_weather(self) -> None:
        generator = _FakeGenerator(text="tip")
        weather = _FakeWeather(context=_pune_weather())
        service = SmartTipsService(
            _config(GEMINI_API_KEY=""), generator=generator, weather=weather
        )
        with self.assertRaises(MissingCredentialError) as ctx:
            service.tips(SmartTipsRequest(crop="Wheat", city="Pune", category="Irrigation"))
        self.assertEqual(ctx.exception.setting, "GEMINI_API_KEY")
        self.assertEqual(weather.cities, [])
        self.assertEqual(generator.calls, [])

    def test_missing_weather_key(self) -> None:
        service = SmartTipsService(
            _config(WEATHER_API_KEY=""),
            generator=_FakeGenerator(text="tip"),
            weather=_FakeWeather(context=_pune_weather()),
        )
        with self.assertRaises(MissingCredentialError) as ctx:
            service.tips(SmartTipsRequest(crop="Wheat", city="Pune", category="Irrigation"))
        self.assertEqual(ctx.exception.setting, "WEATHER_API_KEY")

    def test_unknown_city_propagates(self) -> None:
        generator = _FakeGenerator(text="tip")
        weather = _FakeWeather(exc=UpstreamError('City "Atlantis" not found.', status_code=404))
        service = SmartTipsService(_config(), generator=generator, weather=weather)
        with self.assertRaises(UpstreamError):
            service.tips(SmartTipsRequest(crop="Wheat", city="Atlantis", category="Pests"))
        self.assertEqual(generator.calls, [])

    def test_resource_optimizer_without_resources_sets_notice(self) -> None:
        generator = _FakeGenerator(text="Use drip lines\nIrrigate at dusk")
        service = ResourceOptimizerService(
            _config(), generator=generator, weather=_FakeWeather(context=_pune_weather())
        )
        result = service.optimize(ResourceOptimizationRequest(crop="Maize", city="Pune"))
        self.assertEqual(len(result.items), 2)
        self.assertIsNotNone(result.notice)

    def test_resource_optimizer_lists_resources(self) -> None:
        generator = _FakeGenerator(text="Use drip lines")
        service = ResourceOptimizerService(
            _config(), generator=generator, weather=_FakeWeather(context=_pune_weather())
        )
        result = service.optimize(
            ResourceOptimizationRequest(crop="Maize", city="Pune", resources=["Water", "Labor"])
        )
        self.assertIsNone(result.notice)
        self.assertIn("Water, Labor", generator.calls[0][0])


@unittest.skipUnless(
    not _MISSING_PYDANTIC_SETTINGS, "pydantic_settings is not installed"
)
class WeatherAlertServiceTests(unittest.TestCase):
    def test_days_are_cleaned_and_split(self) -> None:
        generator = _FakeGenerator(text="**Day 1:** sunny\n**Day 2:** rain\n**Day 3:** sunny")
        result = WeatherAlertService(
            _config(), generator=generator, weather=_FakeWeather(context=_pune_weather())
        ).alert(WeatherAlertRequest(crop="Wheat", city="Pune"))
        self.assertEqual(result.days, ["Day 1: sunny", "Day 2: rain", "Day 3: sunny"])
        self.assertEqual(result.formatted, "Day 1: sunny\n\nDay 2: rain\n\nDay 3: sunny")

    def test_whitespace_reply_gives_placeholder(self) -> None:
        generator = _FakeGenerator(text="  \n", finish_reason="STOP")
        result = WeatherAlertService(
            _config(), generator=generator, weather=_FakeWeather(context=_pune_weather())
        ).alert(WeatherAlertRequest(crop="Wheat", city="Pune"))
        self.assertEqual(result.days, [])
        self.assertEqual(result.formatted, NO_ALERT_MESSAGE)

    def test_truncated_empty_reply_raises(self) -> None:
        generator = _FakeGenerator(text="", finish_reason="MAX_TOKENS")
        service = WeatherAlertService(
            _config(), generator=generator, weather=_FakeWeather(context=_pune_weather())
        )
        with self.assertRaises(GenerationRefusedError) as ctx:
            service.alert(WeatherAlertRequest(crop="Wheat", city="Pune"))
        self.assertEqual(ctx.exception.kind, "length_truncated")


@unittest.skipUnless(
    not _MISSING_PYDANTIC_SETTINGS, "pydantic_settings is not installed"
)
class DiagnosisServiceTests(unittest.TestCase):
    def test_data_url_is_sent_as_image(self) -> None:
        generator = _FakeGenerator(text="1. Diagnosis\nLeaf rust\n2. Treatment\nApply fungicide")
        result = DiagnosisService(_config(), generator=generator).diagnose(
            DiagnosisRequest(image_base64="data:image/png;base64,aGVsbG8=")
        )
        self.assertEqual([s.title for s in result.sections], ["Diagnosis", "Treatment"])
        _, image = generator.calls[0]
        self.assertEqual(image.mime_type, "image/png")
        self.assertEqual(image.data, "aGVsbG8=")

    def test_non_image_is_rejected(self) -> None:
        generator = _FakeGenerator(text="x")
        with self.assertRaises(InvalidInputError):
            DiagnosisService(_config(), generator=generator).diagnose(
                DiagnosisRequest(image_base64="aGVsbG8=", mime_type="application/pdf")
            )
        self.assertEqual(generator.calls, [])

    def test_missing_mime_type_is_rejected(self) -> None:
        with self.assertRaises(InvalidInputError):
            DiagnosisService(_config(), generator=_FakeGenerator(text="x")).diagnose(
                DiagnosisRequest(image_base64="aGVsbG8=")
            )

    def test_bad_base64_is_rejected(self) -> None:
        with self.assertRaises(InvalidInputError):
            DiagnosisService(_config(), generator=_FakeGenerator(text="x")).diagnose(
                DiagnosisRequest(image_base64="not base64!!", mime_type="image/jpeg")
            )

    def test_disease_advice(self) -> None:
        generator = _FakeGenerator(text="1. Symptoms\nYellow spots\n2. Prevention\nRotate crops")
        result = DiagnosisService(_config(), generator=generator).advise(
            DiseaseAdviceRequest(disease="Early blight")
        )
        self.assertEqual(result.disease, "Early blight")
        self.assertEqual(len(result.sections), 2)
        self.assertIn("Early blight", generator.calls[0][0])


@unittest.skipUnless(
    not _MISSING_PYDANTIC_SETTINGS, "pydantic_settings is not installed"
)
class HarvestingServiceTests(unittest.TestCase):
    def test_plan_without_city(self) -> None:
        weather = _FakeWeather()
        result = HarvestingService(_config(), weather=weather).plan(
            HarvestPlanRequest(crop="Wheat", farm_size=10)
        )
        self.assertEqual(result.crop, "wheat")
        self.assertAlmostEqual(result.estimated_yield_tons, 5.0)
        self.assertAlmostEqual(result.estimated_cost, 10000.0)
        self.assertIn("Combine Harvester", result.tools.equipment)
        self.assertIsNone(result.readiness)
        self.assertEqual(weather.cities, [])

    def test_rain_soon_gives_warning(self) -> None:
        weather = _FakeWeather(forecast=_forecast(rain_days={1}))
        result = HarvestingService(_config(), weather=weather).plan(
            HarvestPlanRequest(crop="rice", farm_size=2, city="Pune")
        )
        self.assertEqual(result.readiness.status, "warning")
        self.assertEqual(len(result.forecast.days), 7)

    def test_late_rain_is_safe(self) -> None:
        weather = _FakeWeather(forecast=_forecast(rain_days={5}))
        result = HarvestingService(_config(), weather=weather).plan(
            HarvestPlanRequest(crop="corn", farm_size=2, city="Pune")
        )
        self.assertEqual(result.readiness.status, "success")

    def test_unknown_crop(self) -> None:
        result = HarvestingService(_config(), weather=_FakeWeather()).plan(
            HarvestPlanRequest(crop="quinoa", farm_size=4)
        )
        self.assertEqual(result.estimated_yield_tons, 0.0)
        self.assertEqual(result.estimated_cost, 0.0)
        self.assertIsNone(result.tools)
        self.assertEqual(result.speedup_tips, [])


class _FakeRelay:
    def __init__(self):
        self.sent = []

    def send(self, *, name, reply_to, message):
        self.sent.append((name, reply_to, message))
        return 200


class _FakeIdentity:
    def __init__(self, user=None):
        self.user = user
        self.revoked = []

    def current_user(self, session_id):
        return self.user if session_id else None

    def sign_out(self, session_id):
        self.revoked.append(session_id)
        return True


@unittest.skipUnless(
    not _MISSING_PYDANTIC_SETTINGS, "pydantic_settings is not installed"
)
class ContactAndSessionServiceTests(unittest.TestCase):
    def test_contact_relays_message(self) -> None:
        relay = _FakeRelay()
        result = ContactService(_config(), relay=relay).send(
            ContactRequest(name="Asha", email="asha@example.com", message="Need seeds")
        )
        self.assertEqual(result.status_code, 200)
        self.assertEqual(result.message, "Message sent successfully!")
        self.assertEqual(relay.sent, [("Asha", "asha@example.com", "Need seeds")])

    def test_whoami_signed_in(self) -> None:
        identity = _FakeIdentity(CurrentUser(user_id="user_1", first_name="Ravi"))
        status = SessionService(_config(), identity=identity).whoami("sess_1")
        self.assertTrue(status.signed_in)
        self.assertEqual(status.first_name, "Ravi")

    def test_whoami_signed_out(self) -> None:
        status = SessionService(_config(), identity=_FakeIdentity()).whoami(None)
        self.assertFalse(status.signed_in)
        self.assertIsNone(status.first_name)

    def test_sign_out(self) -> None:
        identity = _FakeIdentity(CurrentUser(user_id="user_1"))
        status = SessionService(_config(), identity=identity).sign_out("sess_1")
        self.assertFalse(status.signed_in)
        self.assertEqual(identity.revoked, ["sess_1"])


if __name__ == "__main__":
    unittest.main()
