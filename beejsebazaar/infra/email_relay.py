from __future__ import annotations

from typing import Optional

import httpx

from ..domain.errors import UpstreamError
from ..observability.logging_utils import log_event
from ..observability.otel import record_exception, start_span
from .config import AppConfig


class EmailRelayClient:
    """Contact-form delivery through the EmailJS REST endpoint."""

    def __init__(self, config: AppConfig, *, transport: Optional[httpx.BaseTransport] = None):
        self._config = config
        self._transport = transport

    def send(self, *, name: str, reply_to: str, message: str) -> int:
        cfg = self._config
        body = {
            "service_id": cfg.require("emailjs_service_id"),
            "template_id": cfg.require("emailjs_template_id"),
            "user_id": cfg.require("emailjs_public_key"),
            "template_params": {
                "to_name": cfg.contact_recipient_name,
                "from_name": name,
                "message": message,
                "reply_to": reply_to,
            },
        }
        with start_span("email_relay.send", {"template_id": body["template_id"]}) as span:
            try:
                with httpx.Client(
                    timeout=cfg.http_timeout_seconds,
                    trust_env=False,
                    transport=self._transport,
                ) as client:
                    response = client.post(cfg.emailjs_api_url, json=body)
            except httpx.HTTPError as exc:
                record_exception(span, exc)
                raise UpstreamError(f"Failed to send message: {exc}") from exc

        log_event("email_relay.response", status=response.status_code)
        if response.status_code != 200:
            detail = response.text.strip() or response.reason_phrase
            raise UpstreamError(
                f"Failed to send message: {detail}",
                upstream_status=response.status_code,
            )
        return response.status_code
