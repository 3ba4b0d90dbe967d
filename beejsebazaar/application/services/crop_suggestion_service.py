from __future__ import annotations

import logging
from typing import Optional

from ...domain.errors import GenerationRefusedError
from ...domain.structuring import extract_recommendation
from ...infra.config import AppConfig
from ...infra.generation import GenerationClient
from ...observability.logging_utils import log_event
from ...prompts.advisory import build_crop_suggestion_prompt
from ...schemas import CropSuggestionRequest, RecommendationRecord
from .common import stop_reason


class CropSuggestionService:
    """Crop recommendation page: JSON reply -> RecommendationRecord."""

    def __init__(self, config: AppConfig, *, generator: Optional[GenerationClient] = None):
        self._config = config
        self._generator = generator or GenerationClient(config)

    def suggest(self, req: CropSuggestionRequest) -> RecommendationRecord:
        prompt = build_crop_suggestion_prompt(req)
        try:
            result = self._generator.generate(prompt)
        except GenerationRefusedError as exc:
            # refusals surface as a sentinel record like any other unusable reply
            return RecommendationRecord.sentinel(exc.message, kind=exc.kind)

        record = extract_recommendation(result.text, stop_reason(result))
        secondary = record.secondary_crop_suggestion
        if secondary is not None and not secondary.is_complete:
            log_event(
                "crop_suggestion.incomplete_secondary",
                level=logging.WARNING,
                secondary=secondary.model_dump(),
            )
        log_event(
            "crop_suggestion.done",
            crop=record.crop,
            error_kind=record.error_kind,
            has_secondary=secondary is not None,
        )
        return record
