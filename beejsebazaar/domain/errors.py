from __future__ import annotations

from typing import Optional


class AdvisoryError(Exception):
    """Base error surfaced to the page that triggered the request."""

    status_code = 500
    kind = "error"

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class MissingCredentialError(AdvisoryError):
    """Raised before any request when a required key/identifier is absent."""

    status_code = 503
    kind = "missing_credential"

    def __init__(self, setting: str, label: Optional[str] = None):
        self.setting = setting
        name = label or setting
        super().__init__(
            f"{name} is missing. Please configure the {setting} environment variable."
        )


class UpstreamError(AdvisoryError):
    """Non-2xx responses, unreachable hosts and other transport failures."""

    status_code = 502
    kind = "upstream"

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        upstream_status: Optional[int] = None,
    ):
        self.upstream_status = upstream_status
        super().__init__(message, status_code=status_code)


class GenerationRefusedError(AdvisoryError):
    """The generation endpoint stopped without a usable reply."""

    status_code = 422

    def __init__(self, message: str, *, kind: str, finish_reason: Optional[str] = None):
        self.kind = kind
        self.finish_reason = finish_reason
        super().__init__(message)


class InvalidInputError(AdvisoryError):
    status_code = 400
    kind = "invalid_input"
