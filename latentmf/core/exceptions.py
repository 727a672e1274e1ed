"""Error types raised by the factorisation training core."""

from __future__ import annotations

from typing import Any, Dict, Optional


class MatrixFactorizationError(Exception):
    """Base exception for training-core errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(MatrixFactorizationError):
    """Raised when setup parameters or configuration values are invalid."""


class DivergenceError(MatrixFactorizationError):
    """Raised when the training loss becomes NaN or infinite."""

    def __init__(self, iteration: int, loss: float) -> None:
        message = (
            "Loss = NaN or Infinity: current settings does not fit the recommender! "
            "Change the settings and try again!"
        )
        super().__init__(message, details={"iteration": iteration, "loss": loss})
        self.iteration = iteration
        self.loss = loss
