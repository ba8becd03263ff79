"""Deterministic oracles for tests, demos and offline runs."""

from __future__ import annotations

import itertools
import json
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Union

from services.errors import OracleError


@dataclass(frozen=True)
class OracleCall:
    system_prompt: str
    user_prompt: str
    temperature: float
    max_tokens: int
    json_mode: bool


class ScriptedOracle:
    """Replays canned answers and records every request.

    Scoring calls (``json_mode=False``) cycle through ``scores``, or ask
    ``score_fn(user_prompt)`` when given. JSON calls return ``json_payload``
    serialized, or a raw string as-is so malformed output can be simulated.
    """

    name = "Scripted"

    def __init__(
        self,
        scores: Iterable[Union[float, str]] = ("0.5",),
        json_payload: Union[dict, str, None] = None,
        score_fn: Optional[Callable[[str], Union[float, str]]] = None,
    ):
        self._scores = itertools.cycle(list(scores))
        self._score_fn = score_fn
        self.json_payload = json_payload if json_payload is not None else {}
        self.calls: List[OracleCall] = []

    async def analyze_text(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float = 0.3,
        max_tokens: int = 1000,
        json_mode: bool = False,
    ) -> str:
        self.calls.append(OracleCall(system_prompt, user_prompt, temperature, max_tokens, json_mode))
        if json_mode:
            if isinstance(self.json_payload, str):
                return self.json_payload
            return json.dumps(self.json_payload)
        answer: Any = self._score_fn(user_prompt) if self._score_fn else next(self._scores)
        return str(answer)

    @property
    def scoring_calls(self) -> List[OracleCall]:
        return [c for c in self.calls if not c.json_mode]


class FailingOracle:
    """Raises on every call; exercises the degraded-mode paths."""

    name = "Failing"

    def __init__(self, error: Optional[Exception] = None):
        self.error = error or OracleError("oracle unavailable")
        self.call_count = 0

    async def analyze_text(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float = 0.3,
        max_tokens: int = 1000,
        json_mode: bool = False,
    ) -> str:
        self.call_count += 1
        raise self.error
