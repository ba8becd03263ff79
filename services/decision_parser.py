"""Free-text decision parsing (LLM-assisted).

The oracle turns a user's description into whatever structure it sees fit;
this module only guarantees the answer is a JSON object. Unlike scoring and
narrative synthesis there is no fallback here: failures raise typed errors.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from services.errors import MalformedOracleOutputError, OracleError
from services.llm.guardrails import parse_json_object
from services.llm.oracle import TextOracle

logger = logging.getLogger(__name__)

PARSER_SYSTEM_PROMPT = (
    "You are an expert life decision analyst. Extract structured information from user descriptions."
)
PARSER_TEMPERATURE = 0.3
PARSER_MAX_TOKENS = 1000


async def analyze_user_input(oracle: TextOracle, prompt: str) -> Dict[str, Any]:
    """
    Parse a natural language decision description into a JSON object.

    Args:
        oracle: Text oracle
        prompt: Raw user text

    Returns:
        The parsed JSON object, unvalidated

    Raises:
        ValueError: ``prompt`` is blank
        OracleError: the oracle call failed
        MalformedOracleOutputError: the answer was not a JSON object
    """
    if not (prompt or "").strip():
        raise ValueError("decision description is empty")

    try:
        content = await oracle.analyze_text(
            PARSER_SYSTEM_PROMPT,
            prompt,
            temperature=PARSER_TEMPERATURE,
            max_tokens=PARSER_MAX_TOKENS,
            json_mode=True,
        )
    except OracleError:
        logger.error("User input analysis failed on %s", oracle.name)
        raise
    except Exception as e:
        logger.error("User input analysis failed on %s: %s", oracle.name, e)
        raise OracleError(f"{oracle.name} request failed: {type(e).__name__}: {e}") from e

    try:
        return parse_json_object(content)
    except MalformedOracleOutputError:
        logger.error("User input analysis returned malformed output")
        raise
