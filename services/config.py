"""Runtime settings read from the environment (.env supported)."""
import math
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_GROQ_MODEL = "llama-3.3-70b-versatile"


def _int_env(name: str, default: int, minimum: int = 1) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return value


@dataclass(frozen=True)
class AnalysisSettings:
    max_depth: int = 5
    simulation_count: int = 100
    exploration_constant: float = math.sqrt(2)
    monte_carlo_iterations: int = 1000
    random_seed: Optional[int] = None
    groq_model: str = DEFAULT_GROQ_MODEL

    @classmethod
    def from_env(cls) -> "AnalysisSettings":
        seed_raw = os.getenv("RANDOM_SEED")
        return cls(
            max_depth=_int_env("MCTS_MAX_DEPTH", cls.max_depth),
            simulation_count=_int_env("MCTS_SIMULATION_COUNT", cls.simulation_count),
            exploration_constant=_float_env("MCTS_EXPLORATION_CONSTANT", cls.exploration_constant),
            monte_carlo_iterations=_int_env("SIMULATION_COUNT", cls.monte_carlo_iterations),
            random_seed=_int_env("RANDOM_SEED", 0, minimum=0) if seed_raw and seed_raw.strip() else None,
            groq_model=os.getenv("GROQ_MODEL", cls.groq_model),
        )
