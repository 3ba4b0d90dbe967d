from __future__ import annotations

from typing import Optional

from ...infra.config import AppConfig
from ...infra.email_relay import EmailRelayClient
from ...observability.logging_utils import log_event
from ...schemas import ContactRequest, ContactResult


class ContactService:
    def __init__(self, config: AppConfig, *, relay: Optional[EmailRelayClient] = None):
        self._config = config
        self._relay = relay or EmailRelayClient(config)

    def send(self, req: ContactRequest) -> ContactResult:
        status = self._relay.send(name=req.name, reply_to=req.email, message=req.message)
        log_event("contact.sent", status=status)
        return ContactResult(status_code=status, message="Message sent successfully!")
