from __future__ import annotations

import json
import os
from contextlib import contextmanager
from typing import Dict, Optional

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode


_SERVICE_NAME = "beejsebazaar"
_OTEL_INITIALIZED = False
_OTEL_INSTRUMENTED = False
_OTEL_ATTR_MAX_LEN = int(os.getenv("OTEL_ATTR_MAX_LEN", "2000"))


def _parse_pairs(raw: Optional[str]) -> Dict[str, str]:
    if not raw:
        return {}
    pairs: Dict[str, str] = {}
    for item in raw.split(","):
        item = item.strip()
        if not item or "=" not in item:
            continue
        key, value = item.split("=", 1)
        key = key.strip()
        value = value.strip()
        if key and value:
            pairs[key] = value
    return pairs


def _safe_serialize(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return str(value)


def build_span_attributes(
    prefix: str, payload: object, limit: Optional[int] = None
) -> Dict[str, object]:
    text = _safe_serialize(payload)
    size = len(text)
    max_len = _OTEL_ATTR_MAX_LEN if limit is None else limit
    truncated = bool(max_len) and size > max_len
    if truncated:
        text = text[:max_len] + "..."
    return {
        prefix: text,
        f"{prefix}.size": size,
        f"{prefix}.truncated": truncated,
    }


@contextmanager
def start_span(name: str, attributes: Optional[Dict[str, object]] = None):
    """Span around one upstream call; a no-op tracer when no exporter is set."""
    tracer = trace.get_tracer(os.getenv("OTEL_SERVICE_NAME") or _SERVICE_NAME)
    with tracer.start_as_current_span(name) as span:
        for key, value in (attributes or {}).items():
            if value is not None:
                span.set_attribute(key, value)
        yield span


def record_exception(span: object, exc: Exception) -> None:
    if span is None:
        return
    span.record_exception(exc)
    span.set_status(Status(StatusCode.ERROR, str(exc)))


def _resolve_traces_endpoint(base: Optional[str], override: Optional[str]) -> Optional[str]:
    endpoint = (override or base or "").strip()
    if not endpoint:
        return None
    if "/v1/" in endpoint:
        return endpoint
    return endpoint.rstrip("/") + "/v1/traces"


def init_otel(service_name: Optional[str] = None) -> bool:
    """Install an OTLP/HTTP span exporter when an endpoint is configured."""
    global _OTEL_INITIALIZED
    if _OTEL_INITIALIZED:
        return True
    exporter_name = (os.getenv("OTEL_TRACES_EXPORTER") or "otlp").strip().lower()
    if exporter_name in {"none", "off", "false", "0"}:
        return False
    endpoint = _resolve_traces_endpoint(
        os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT"),
        os.getenv("OTEL_EXPORTER_OTLP_TRACES_ENDPOINT"),
    )
    if not endpoint:
        return False

    from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor

    service = service_name or os.getenv("OTEL_SERVICE_NAME") or _SERVICE_NAME
    resource = Resource.create(
        {
            "service.name": service,
            **_parse_pairs(os.getenv("OTEL_RESOURCE_ATTRIBUTES")),
        }
    )
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(
        BatchSpanProcessor(
            OTLPSpanExporter(
                endpoint=endpoint,
                headers=_parse_pairs(os.getenv("OTEL_EXPORTER_OTLP_HEADERS")),
            )
        )
    )
    trace.set_tracer_provider(provider)
    _OTEL_INITIALIZED = True
    return True


def instrument_app(app: object) -> bool:
    """Instrument FastAPI routes and outgoing httpx calls once."""
    global _OTEL_INSTRUMENTED
    if _OTEL_INSTRUMENTED:
        return True
    from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
    from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor

    FastAPIInstrumentor.instrument_app(app)
    HTTPXClientInstrumentor().instrument()
    _OTEL_INSTRUMENTED = True
    return True
