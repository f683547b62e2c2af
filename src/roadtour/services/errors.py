"""Error types raised by the projection and routing services."""

from __future__ import annotations


class PreconditionError(ValueError):
    """An operation was invoked before its required input was loaded."""


class InputMalformedError(ValueError):
    """A parsed record failed validation."""

    def __init__(self, message: str, *, line_number: int | None = None) -> None:
        super().__init__(message)
        self.line_number = line_number


class SizeLimitExceededError(ValueError):
    """The instance is too large for exhaustive search."""

    def __init__(self, node_count: int, limit: int) -> None:
        super().__init__(
            f"Exact solver supports at most {limit} points, got {node_count}. "
            "Reduce the number of points for this run."
        )
        self.node_count = node_count
        self.limit = limit


class SolverCancelledError(RuntimeError):
    """The exhaustive search was stopped before it finished."""

    def __init__(self, message: str, *, evaluated: int = 0, elapsed_ms: float = 0.0) -> None:
        super().__init__(message)
        self.evaluated = evaluated
        self.elapsed_ms = elapsed_ms
