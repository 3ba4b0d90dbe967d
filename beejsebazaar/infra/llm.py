from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI

from .config import AppConfig


def get_chat_model(cfg: AppConfig, *, vision: bool = False) -> BaseChatModel:
    """Gemini through its OpenAI-compatible endpoint."""
    kwargs = {
        "api_key": cfg.require("gemini_api_key"),
        "base_url": cfg.generation_api_base,
        "model": cfg.vision_model if vision else cfg.generation_model,
        "temperature": cfg.generation_temperature,
        "max_retries": 0,
    }
    return ChatOpenAI(**kwargs)
