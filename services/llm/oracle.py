"""Text oracle capability consumed by the analysis services."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TextOracle(Protocol):
    """Black-box text generator.

    Implementations return either a bare decimal (scoring prompts) or a JSON
    document (``json_mode=True``). Failures should surface as
    ``services.errors.OracleError``; callers decide whether to fall back.
    """

    name: str

    async def analyze_text(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float = 0.3,
        max_tokens: int = 1000,
        json_mode: bool = False,
    ) -> str:
        ...
