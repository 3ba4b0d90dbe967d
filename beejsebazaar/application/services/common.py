from __future__ import annotations

from typing import Optional

from ...domain.errors import GenerationRefusedError
from ...domain.structuring import classify_finish_reason
from ...schemas import GenerationResult


STOP_MESSAGES = {
    "blocked": "AI generation stopped: {reason}. The prompt might have been blocked.",
    "length_truncated": "AI generation stopped: {reason}. The response was too long.",
    "stopped": "AI generation stopped: {reason}.",
}


def stop_reason(result: GenerationResult) -> Optional[str]:
    return result.block_reason or result.finish_reason


def raise_for_stop(result: GenerationResult) -> None:
    """Raise when the endpoint stopped abnormally without returning text."""
    if result.text and result.text.strip():
        return
    reason = stop_reason(result)
    kind = "blocked" if result.block_reason else classify_finish_reason(reason)
    if kind:
        raise GenerationRefusedError(
            STOP_MESSAGES[kind].format(reason=reason),
            kind=kind,
            finish_reason=reason,
        )


def ensure_reply(result: GenerationResult, *, empty_message: str) -> str:
    raise_for_stop(result)
    if not result.text or not result.text.strip():
        raise GenerationRefusedError(empty_message, kind="empty_reply")
    return result.text
