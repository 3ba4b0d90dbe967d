"""
BeejSeBazaar farmer advisory service.
"""

from beejsebazaar.domain.structuring import (
    extract_recommendation,
    format_day_blocks,
    parse_lines,
    parse_sections,
    strip_markdown,
)
from beejsebazaar.infra.config import AppConfig, get_config

__version__ = "1.0.0"
__all__ = [
    "AppConfig",
    "extract_recommendation",
    "format_day_blocks",
    "get_config",
    "parse_lines",
    "parse_sections",
    "strip_markdown",
]
