"""Groq LLM client wrapper (single integration point).

Design goals:
- Centralize provider specifics (model selection, JSON mode, error handling).
- Keep calling code provider-agnostic: services only see ``TextOracle``.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

import groq
from dotenv import load_dotenv
from groq import AsyncGroq

from services.config import DEFAULT_GROQ_MODEL, AnalysisSettings
from services.errors import OracleError
from services.llm.oracle import TextOracle

load_dotenv()

logger = logging.getLogger(__name__)


class GroqOracle:
    """Thin async wrapper around Groq Chat Completions."""

    name = "Groq"

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        api_key = api_key or os.getenv("GROQ_API_KEY")
        if not api_key:
            raise ValueError("GROQ_API_KEY not found in environment variables")

        self.model = model or DEFAULT_GROQ_MODEL
        self._client = AsyncGroq(api_key=api_key)

    async def analyze_text(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float = 0.3,
        max_tokens: int = 1000,
        json_mode: bool = False,
    ) -> str:
        """Perform one chat completion and return the assistant text."""
        kwargs = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            completion = await self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
                **kwargs,
            )
        except groq.APIError as e:
            raise OracleError(f"{self.name} request failed: {type(e).__name__}: {e}") from e

        choice = completion.choices[0]
        text = (choice.message.content or "").strip()
        usage = getattr(completion, "usage", None)
        if usage is not None:
            logger.debug("%s usage: %s", self.model, usage.model_dump())
        return text


def create_oracle(
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    settings: Optional[AnalysisSettings] = None,
) -> TextOracle:
    """Build the production oracle; the model comes from ``settings`` (GROQ_MODEL) unless given."""
    if model is None:
        model = (settings or AnalysisSettings.from_env()).groq_model
    oracle = GroqOracle(api_key=api_key, model=model)
    logger.info("Using %s oracle with model %s", oracle.name, oracle.model)
    return oracle
