"""
Turn loosely formatted generation replies into structures the pages render.

Four shapes are supported:

- numbered headings followed by bullet lines -> ``StructuredSection`` list
- one suggestion per line -> flat list of strings
- a JSON object buried in prose or a code fence -> ``RecommendationRecord``
- a 7-day alert -> markdown-free ``Day N:`` blocks

None of these functions raise. When no structure can be found they fall back
to the most permissive shape for that variant.
"""

from __future__ import annotations

import json
import re
from typing import List, Optional, Tuple

from pydantic import ValidationError

from ..observability.logging_utils import log_event, summarize_text
from ..schemas.models import RecommendationRecord, StructuredSection


FALLBACK_SECTION_TITLE = "General Guidance"

_HEADING_RE = re.compile(r"^[ \t]*(\d+)\.[ \t]+(.+?)[ \t]*$", re.MULTILINE)
_BULLET_RE = re.compile(r"^[-*•]\s*")

_JSON_FENCE_RE = re.compile(r"```json\s*(.*?)\s*```", re.IGNORECASE | re.DOTALL)
_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)

_BOLD_RE = re.compile(r"\*\*(.*?)\*\*")
_ITALIC_RE = re.compile(r"\*(.*?)\*")
_CODE_RE = re.compile(r"`(.*?)`")
_HEADING_MARK_RE = re.compile(r"^[ \t]*#+[ \t]*", re.MULTILINE)
_DASH_ITEM_RE = re.compile(r"^[ \t]*-[ \t]+", re.MULTILINE)
_BLANK_RUN_RE = re.compile(r"\n(?:[ \t]*\n)+")
_DAY_SPLIT_RE = re.compile(r"(?=\bday\s*\d+\s*:)", re.IGNORECASE)

_SUCCESS_FINISH_REASONS = {"stop", "end_turn", "finish_reason_unspecified"}
_BLOCKED_FINISH_REASONS = {
    "safety",
    "blocklist",
    "prohibited_content",
    "spii",
    "recitation",
    "content_filter",
    "image_safety",
    "blocked",
}
_LENGTH_FINISH_REASONS = {"max_tokens", "length"}

ERROR_MESSAGES = {
    "blocked": (
        "Suggestion generation stopped: {reason}. The prompt or response "
        "might have been blocked due to safety filters."
    ),
    "length_truncated": (
        "Suggestion generation stopped: {reason}. The response was too long."
    ),
    "stopped": "Suggestion generation stopped: {reason}.",
    "empty_reply": "No suggestion received from the AI.",
    "no_json_found": "Could not find JSON in the AI response.",
    "malformed_json": (
        "Failed to parse suggestion. The AI might have provided an invalid format."
    ),
}


def _normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _clean_point(line: str) -> str:
    return _BULLET_RE.sub("", line.strip(), count=1).strip()


def _collect_points(block: str) -> List[str]:
    points = (_clean_point(line) for line in block.split("\n"))
    return [point for point in points if point]


def parse_sections(text: Optional[str]) -> List[StructuredSection]:
    """Split a ``"1. Heading"`` style reply into titled bullet sections."""
    if not text:
        return []
    text = _normalize_newlines(text)

    headings: List[Tuple[str, int, int]] = [
        (match.group(2).strip(), match.start(), match.end())
        for match in _HEADING_RE.finditer(text)
    ]
    sections: List[StructuredSection] = []
    for idx, (title, _, body_start) in enumerate(headings):
        body_end = headings[idx + 1][1] if idx + 1 < len(headings) else len(text)
        points = _collect_points(text[body_start:body_end])
        if title and points:
            sections.append(StructuredSection(title=title, points=points))

    if sections or not text.strip():
        return sections

    # a reply made only of bullet glyphs keeps its raw lines
    fallback = _collect_points(text) or parse_lines(text)
    log_event(
        "structuring.sections_fallback",
        headings=len(headings),
        points=len(fallback),
    )
    return [StructuredSection(title=FALLBACK_SECTION_TITLE, points=fallback)]


def parse_lines(text: Optional[str]) -> List[str]:
    """One tip per non-empty line, in source order, duplicates kept."""
    if not text:
        return []
    lines = (line.strip() for line in _normalize_newlines(text).split("\n"))
    return [line for line in lines if line]


def classify_finish_reason(reason: Optional[str]) -> Optional[str]:
    """Return ``None`` for a normal stop, else the failure kind."""
    if reason is None:
        return None
    key = str(reason).strip().lower()
    if not key or key in _SUCCESS_FINISH_REASONS:
        return None
    if key in _BLOCKED_FINISH_REASONS:
        return "blocked"
    if key in _LENGTH_FINISH_REASONS:
        return "length_truncated"
    return "stopped"


def _error_record(kind: str, finish_reason: Optional[str] = None) -> RecommendationRecord:
    message = ERROR_MESSAGES[kind].format(reason=finish_reason or "unknown")
    return RecommendationRecord.sentinel(message, kind=kind)


def _find_json_candidate(reply: str) -> Optional[str]:
    fenced = _JSON_FENCE_RE.search(reply)
    if fenced:
        return fenced.group(1)
    outer = _JSON_OBJECT_RE.search(reply)
    if outer:
        return outer.group(0)
    return None


def extract_recommendation(
    reply: Optional[str], finish_reason: Optional[str] = None
) -> RecommendationRecord:
    """
    Recover the crop recommendation object from a generation reply.

    Args:
        reply: raw text returned by the generation endpoint.
        finish_reason: provider finish reason, if known.

    Returns:
        The parsed record, or a sentinel record whose ``error`` explains why
        nothing usable was found. Never raises.
    """
    stop_kind = classify_finish_reason(finish_reason)
    if not reply or not reply.strip():
        return _error_record(stop_kind or "empty_reply", finish_reason)

    candidate = _find_json_candidate(reply)
    if candidate is None:
        log_event("structuring.no_json", reply=summarize_text(reply))
        return _error_record(stop_kind or "no_json_found", finish_reason)

    try:
        parsed = json.loads(candidate)
    except (ValueError, RecursionError) as exc:
        log_event(
            "structuring.malformed_json",
            error=str(exc),
            reply=summarize_text(reply),
        )
        return _error_record(stop_kind or "malformed_json", finish_reason)

    if not isinstance(parsed, dict):
        log_event("structuring.unexpected_json", type=type(parsed).__name__)
        return _error_record(stop_kind or "malformed_json", finish_reason)

    try:
        return RecommendationRecord.from_reply(parsed)
    except (ValidationError, RecursionError) as exc:
        log_event("structuring.invalid_record", error=str(exc))
        return _error_record("malformed_json", finish_reason)


def strip_markdown(text: Optional[str]) -> str:
    """Drop emphasis/code/heading markers but keep the words they wrap."""
    if not text:
        return ""
    cleaned = _normalize_newlines(text)
    cleaned = _BOLD_RE.sub(r"\1", cleaned)
    cleaned = _ITALIC_RE.sub(r"\1", cleaned)
    cleaned = _CODE_RE.sub(r"\1", cleaned)
    cleaned = _HEADING_MARK_RE.sub("", cleaned)
    cleaned = _DASH_ITEM_RE.sub("• ", cleaned)
    cleaned = _BLANK_RUN_RE.sub("\n", cleaned)
    return cleaned


def split_day_blocks(text: Optional[str]) -> List[str]:
    """Cut the text right before every ``Day <n>:`` marker."""
    if not text:
        return []
    blocks = (block.strip() for block in _DAY_SPLIT_RE.split(text))
    return [block for block in blocks if block]


def format_day_blocks(text: Optional[str]) -> str:
    return "\n\n".join(split_day_blocks(text))
