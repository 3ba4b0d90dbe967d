from __future__ import annotations

import base64
import binascii
from typing import Optional

from ...domain.errors import InvalidInputError
from ...domain.structuring import parse_sections
from ...infra.config import AppConfig
from ...infra.generation import GenerationClient, InlineImage
from ...observability.logging_utils import log_event
from ...prompts.advisory import DIAGNOSIS_PROMPT, build_disease_advice_prompt
from ...schemas import DiagnosisRequest, DiagnosisResult, DiseaseAdviceRequest
from .common import ensure_reply


INVALID_IMAGE_MESSAGE = "Please select a valid image file (JPEG, PNG, WEBP, etc.)."


def decode_image(req: DiagnosisRequest) -> InlineImage:
    """Accept raw base64 plus mime type, or a ``data:<mime>;base64,`` URL."""
    data = req.image_base64
    mime_type = req.mime_type
    if data.startswith("data:"):
        header, _, data = data.partition(",")
        mime_type = header[len("data:"):].split(";", 1)[0] or mime_type
    if not mime_type or not mime_type.startswith("image/"):
        raise InvalidInputError(INVALID_IMAGE_MESSAGE)
    try:
        base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidInputError("Failed to read image file.") from exc
    return InlineImage(mime_type=mime_type, data=data)


class DiagnosisService:
    """Plant health check from a photo, and advice for a known disease."""

    def __init__(self, config: AppConfig, *, generator: Optional[GenerationClient] = None):
        self._config = config
        self._generator = generator or GenerationClient(config)

    def diagnose(self, req: DiagnosisRequest) -> DiagnosisResult:
        image = decode_image(req)
        result = self._generator.generate(DIAGNOSIS_PROMPT, image=image)
        reply = ensure_reply(result, empty_message="Received an empty analysis from the AI.")
        sections = parse_sections(reply)
        log_event("diagnosis.done", mime_type=image.mime_type, sections=len(sections))
        return DiagnosisResult(sections=sections, raw=reply)

    def advise(self, req: DiseaseAdviceRequest) -> DiagnosisResult:
        result = self._generator.generate(build_disease_advice_prompt(req.disease))
        reply = ensure_reply(result, empty_message="No advice received from the AI.")
        return DiagnosisResult(sections=parse_sections(reply), raw=reply, disease=req.disease)
