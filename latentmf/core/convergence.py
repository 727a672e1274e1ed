"""
Convergence and divergence checks run after every epoch.

The stopping rule looks at the reported loss itself, not at its change between
epochs: a loss that is already effectively zero counts as converged, while a
loss that plateaus above zero keeps the run going until the epoch cap.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass

from loguru import logger

from .exceptions import DivergenceError

CONVERGENCE_THRESHOLD = 1e-5


class ConvergenceStatus(enum.Enum):
    RUNNING = "running"
    CONVERGED = "converged"


@dataclass
class ConvergenceMonitor:
    """Tracks the last reported loss and classifies each new one."""

    algorithm_name: str = "MatrixFactorization"
    threshold: float = CONVERGENCE_THRESHOLD
    last_loss: float | None = None

    def evaluate(
        self,
        iteration: int,
        reported_loss: float,
        previous_loss: float | None = None,
        verbose: bool = False,
    ) -> ConvergenceStatus:
        """
        Classify ``reported_loss`` for epoch ``iteration``.

        ``previous_loss`` defaults to the loss seen by the previous call. A
        non-finite loss raises :class:`DivergenceError`; the stored last loss is
        updated on every non-diverged call.
        """
        if previous_loss is None:
            previous_loss = self.last_loss
        delta_loss = None if previous_loss is None else previous_loss - reported_loss

        if verbose:
            logger.info(
                "{} iter {}: loss = {}, delta_loss = {}",
                self.algorithm_name,
                iteration,
                reported_loss,
                "n/a" if delta_loss is None else delta_loss,
            )

        if math.isnan(reported_loss) or math.isinf(reported_loss):
            raise DivergenceError(iteration=iteration, loss=reported_loss)

        converged = abs(reported_loss) < self.threshold
        self.last_loss = reported_loss

        return ConvergenceStatus.CONVERGED if converged else ConvergenceStatus.RUNNING

    def reset(self) -> None:
        self.last_loss = None
