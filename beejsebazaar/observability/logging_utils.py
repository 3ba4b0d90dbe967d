from __future__ import annotations

import json
import logging
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional, Union


_TRACE_ID_CTX: ContextVar[str] = ContextVar("trace_id", default="unknown")
_LOGGER = logging.getLogger("beejsebazaar.events")
_INITIALIZED = False

# query/header names that carry upstream credentials
_SECRET_FIELDS = {"appid", "api_key", "authorization", "secret", "user_id", "public_key"}
_MASK = "***"


def _resolve_level(level: Union[int, str, None]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level or "INFO").strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def init_logging(
    *, log_path: Optional[str] = None, level: Union[int, str, None] = logging.INFO
) -> None:
    global _INITIALIZED
    if _INITIALIZED:
        return
    resolved = _resolve_level(level)
    if log_path:
        path = Path(log_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = RotatingFileHandler(
            path, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
        )
    else:
        handler = logging.StreamHandler()
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        handlers=[handler],
    )
    _LOGGER.setLevel(resolved)
    _INITIALIZED = True


def set_trace_id(trace_id: str):
    return _TRACE_ID_CTX.set(trace_id)


def reset_trace_id(token) -> None:
    _TRACE_ID_CTX.reset(token)


def get_trace_id() -> str:
    return _TRACE_ID_CTX.get() or "unknown"


def summarize_text(text: Optional[str], limit: int = 400) -> str:
    """Single-line preview of a generation reply for log events."""
    if not text:
        return ""
    flat = " ".join(str(text).split())
    if len(flat) <= limit:
        return flat
    return f"{flat[:limit]}..."


def _is_secret(name: str) -> bool:
    key = name.lower()
    return key in _SECRET_FIELDS or key.endswith("_key") or key.endswith("_secret")


def redact_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {
        name: (_MASK if value and _is_secret(name) else value)
        for name, value in fields.items()
    }


def log_event(event: str, *, level: int = logging.INFO, **fields: Any) -> None:
    """Emit one JSON line tagged with the current request's trace id."""
    payload = {"event": event, "trace_id": get_trace_id(), **redact_fields(fields)}
    _LOGGER.log(level, json.dumps(payload, ensure_ascii=False, default=str))
