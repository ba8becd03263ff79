"""Error types raised by the analysis core."""
from typing import Optional


class OracleError(RuntimeError):
    """The text oracle could not be reached or refused the request."""


class MalformedOracleOutputError(OracleError, ValueError):
    """The oracle answered, but the answer could not be parsed."""

    def __init__(self, message: str, raw: Optional[str] = None):
        super().__init__(message)
        self.raw = raw


class SimulationModelError(RuntimeError):
    """A forward model raised during a Monte Carlo run."""

    def __init__(self, message: str, iteration: int):
        super().__init__(message)
        self.iteration = iteration
