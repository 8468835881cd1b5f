"""Machine translation providers (placeholder or OpenAI Responses API)."""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from openai import OpenAI
from starlette.concurrency import run_in_threadpool

from src.core.config import settings

logger = logging.getLogger(__name__)

PROVIDER_PLACEHOLDER = "placeholder"
PROVIDER_OPENAI = "openai"

_client: Optional[OpenAI] = None


@dataclass
class TranslationResult:
    translated_text: str
    confidence: Optional[float] = None
    provider: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def get_openai_client() -> OpenAI:
    """Create (or reuse) an OpenAI client configured with the project API key."""

    global _client

    if _client is None:
        if not settings.OPENAI_API_KEY:
            raise RuntimeError("OPENAI_API_KEY is not configured")
        _client = OpenAI(api_key=settings.OPENAI_API_KEY)
    return _client


def _placeholder(source_language: str, target_language: str, text: str) -> TranslationResult:
    return TranslationResult(
        translated_text=f"[Translated from {source_language} to {target_language}]: {text}",
        confidence=0.8,
        provider=PROVIDER_PLACEHOLDER,
    )


def _openai_translate(
    source_language: str, target_language: str, text: str, context: Optional[str]
) -> TranslationResult:
    client = get_openai_client()
    instructions = (
        f"You are a professional translator. Translate the user's text from "
        f"{source_language} to {target_language}. Keep any HTML markup intact "
        f"and reply with the translation only."
    )
    if context:
        instructions += f" Context: {context}"

    response = client.responses.create(
        model=settings.OPENAI_MODEL_DEFAULT,
        instructions=instructions,
        input=text,
        temperature=0.3,
    )
    return TranslationResult(
        translated_text=response.output_text.strip(),
        confidence=0.95,
        provider=PROVIDER_OPENAI,
    )


async def translate_text(
    source_language: str,
    target_language: str,
    text: str,
    context: Optional[str] = None,
) -> TranslationResult:
    if not text:
        return TranslationResult(translated_text="", confidence=1.0, provider=None)

    provider = settings.TRANSLATION_PROVIDER
    if provider == PROVIDER_OPENAI:
        return await run_in_threadpool(
            _openai_translate, source_language, target_language, text, context
        )
    if provider != PROVIDER_PLACEHOLDER:
        logger.warning(f"Unknown translation provider {provider!r}, using placeholder")
    return _placeholder(source_language, target_language, text)


async def translate_bulk(
    texts: List[str],
    source_language: str,
    target_language: str,
    context: Optional[str] = None,
) -> List[TranslationResult]:
    results = []
    for text in texts:
        results.append(await translate_text(source_language, target_language, text, context))
    return results
