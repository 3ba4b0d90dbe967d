from __future__ import annotations

from typing import Optional

from ...domain.structuring import parse_sections
from ...infra.config import AppConfig
from ...infra.generation import GenerationClient
from ...observability.logging_utils import log_event
from ...prompts.advisory import build_best_practices_prompt
from ...schemas import BestPracticesRequest, BestPracticesResult
from .common import ensure_reply


class BestPracticesService:
    def __init__(self, config: AppConfig, *, generator: Optional[GenerationClient] = None):
        self._config = config
        self._generator = generator or GenerationClient(config)

    def fetch(self, req: BestPracticesRequest) -> BestPracticesResult:
        result = self._generator.generate(build_best_practices_prompt(req))
        reply = ensure_reply(
            result, empty_message="Empty response received from the AI. Please try again."
        )
        sections = parse_sections(reply)
        log_event("best_practices.done", crop=req.crop, sections=len(sections))
        return BestPracticesResult(
            crop=req.crop,
            crop_age_days=req.crop_age_days,
            sections=sections,
            raw=reply,
        )
