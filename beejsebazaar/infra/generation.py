from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import openai
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage

from ..domain.errors import GenerationRefusedError, UpstreamError
from ..observability.logging_utils import log_event, summarize_text
from ..observability.otel import build_span_attributes, record_exception, start_span
from ..schemas import GenerationResult
from .config import AppConfig
from .llm import get_chat_model


ModelFactory = Callable[..., BaseChatModel]


@dataclass
class InlineImage:
    mime_type: str
    data: str  # base64, no data: prefix

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


def _message_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(str(part.get("text") or ""))
        return "".join(parts)
    return ""


def _error_details(body: Any) -> Dict[str, Any]:
    if isinstance(body, list) and body:
        body = body[0]
    if not isinstance(body, dict):
        return {}
    error = body.get("error")
    return error if isinstance(error, dict) else body


def _block_reason(body: Any) -> Optional[str]:
    if isinstance(body, list) and body:
        body = body[0]
    if not isinstance(body, dict):
        return None
    feedback = body.get("promptFeedback") or {}
    if isinstance(feedback, dict) and feedback.get("blockReason"):
        return str(feedback["blockReason"])
    return None


def _map_status_error(exc: openai.APIStatusError) -> Exception:
    status = exc.status_code
    details = _error_details(exc.body)
    message = details.get("message") or f"Gemini request failed with status {status}"
    block_reason = _block_reason(exc.body)
    if block_reason:
        return GenerationRefusedError(
            f"Gemini request blocked: {block_reason}. {message}",
            kind="blocked",
            finish_reason=block_reason,
        )
    if status in (401, 403):
        return UpstreamError("Invalid Gemini API Key.", upstream_status=status)
    return UpstreamError(f"API Error: {message}", upstream_status=status)


class GenerationClient:
    """Single-shot text/vision generation; no retries."""

    def __init__(self, config: AppConfig, *, model_factory: Optional[ModelFactory] = None):
        self._config = config
        self._model_factory = model_factory or get_chat_model

    def generate(self, prompt: str, *, image: Optional[InlineImage] = None) -> GenerationResult:
        self._config.require("gemini_api_key")
        vision = image is not None
        model = self._model_factory(self._config, vision=vision)
        if image is None:
            content: Any = prompt
        else:
            content = [
                {"type": "text", "text": prompt},
                {"type": "image_url", "image_url": {"url": image.data_url}},
            ]
        model_name = self._config.vision_model if vision else self._config.generation_model
        log_event("generation.request", model=model_name, vision=vision, prompt_chars=len(prompt))

        with start_span(
            "generation.invoke",
            {"model": model_name, "vision": vision, **build_span_attributes("prompt", prompt)},
        ) as span:
            try:
                response = model.invoke([HumanMessage(content=content)])
            except openai.APIStatusError as exc:
                record_exception(span, exc)
                log_event("generation.error", status=exc.status_code, error=str(exc))
                raise _map_status_error(exc) from exc
            except openai.APIConnectionError as exc:
                record_exception(span, exc)
                log_event("generation.error", error=str(exc))
                raise UpstreamError(f"Gemini request failed: {exc}") from exc

            metadata = getattr(response, "response_metadata", None) or {}
            result = GenerationResult(
                text=_message_text(getattr(response, "content", "")),
                finish_reason=metadata.get("finish_reason"),
                block_reason=metadata.get("block_reason"),
                model=metadata.get("model_name") or model_name,
            )
            span.set_attribute("finish_reason", result.finish_reason or "")

        log_event(
            "generation.response",
            finish_reason=result.finish_reason,
            reply=summarize_text(result.text),
        )
        return result
