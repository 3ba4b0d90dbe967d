from __future__ import annotations

from typing import Any


_STRUCTURING_EXPORTS = {
    "FALLBACK_SECTION_TITLE",
    "classify_finish_reason",
    "extract_recommendation",
    "format_day_blocks",
    "parse_lines",
    "parse_sections",
    "split_day_blocks",
    "strip_markdown",
}

__all__ = sorted(_STRUCTURING_EXPORTS)


def __getattr__(name: str) -> Any:
    if name in _STRUCTURING_EXPORTS:
        from . import structuring as _structuring

        return getattr(_structuring, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
