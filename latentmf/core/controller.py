"""
Outer epoch loop shared by every SGD factorisation model.

The controller knows nothing about gradients: it asks an :class:`EpochUpdater`
to run one epoch against the factor tables it is handed, then applies the
convergence check and the learning-rate schedule around the reported loss.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from loguru import logger

from .convergence import ConvergenceMonitor, ConvergenceStatus
from .factors import FactorPair
from .learn_rate import LearnRateScheduler
from .state import TrainingState


@runtime_checkable
class EpochUpdater(Protocol):
    """An algorithm that runs one pass over its observations and returns the loss."""

    def train_epoch(self, factors: FactorPair, state: TrainingState) -> float:
        ...


@dataclass
class TrainingResult:
    status: ConvergenceStatus
    epochs_run: int
    final_loss: float | None
    final_learn_rate: float
    runtime_seconds: float
    loss_history: list[float] = field(default_factory=list)
    learn_rate_history: list[float] = field(default_factory=list)
    stopped: bool = False

    @property
    def converged(self) -> bool:
        return self.status is ConvergenceStatus.CONVERGED


class TrainingLoopController:
    """Drive epochs ``1..num_iterations`` until convergence, divergence or the cap."""

    def __init__(
        self,
        *,
        num_iterations: int,
        monitor: ConvergenceMonitor,
        scheduler: LearnRateScheduler,
        verbose: bool = False,
    ) -> None:
        if num_iterations <= 0:
            raise ValueError("num_iterations must be positive.")
        self.num_iterations = int(num_iterations)
        self.monitor = monitor
        self.scheduler = scheduler
        self.verbose = verbose
        self._stop_requested = threading.Event()

    def request_stop(self) -> None:
        """Ask the loop to stop at the next epoch boundary."""
        self._stop_requested.set()

    @property
    def stop_requested(self) -> bool:
        return self._stop_requested.is_set()

    def run(
        self,
        algorithm: EpochUpdater,
        factors: FactorPair,
        state: TrainingState,
    ) -> TrainingResult:
        """
        Train until the loss converges or ``num_iterations`` epochs have run.

        :class:`~latentmf.core.exceptions.DivergenceError` from the monitor is
        propagated unchanged; the factor tables then hold the diverged epoch.
        """
        self._stop_requested.clear()
        start = time.perf_counter()
        status = ConvergenceStatus.RUNNING
        stopped = False
        epochs_run = 0

        for iteration in range(state.iteration, self.num_iterations + 1):
            state.iteration = iteration
            loss = float(algorithm.train_epoch(factors, state))
            state.record_loss(loss)
            epochs_run += 1

            status = self.monitor.evaluate(
                iteration, loss, state.previous_loss, verbose=self.verbose
            )
            if status is ConvergenceStatus.CONVERGED:
                logger.info("Converged at iteration {} with loss={}", iteration, loss)
                break

            state.learn_rate = self.scheduler.update(
                iteration, state.previous_loss, loss, state.learn_rate
            )

            if self._stop_requested.is_set():
                logger.warning("Stop requested; ending training after iteration {}", iteration)
                stopped = True
                break
        else:
            logger.info(
                "Reached the iteration cap ({}) without converging; last loss={}",
                self.num_iterations,
                state.current_loss,
            )

        return TrainingResult(
            status=status,
            epochs_run=epochs_run,
            final_loss=state.current_loss,
            final_learn_rate=state.learn_rate,
            runtime_seconds=time.perf_counter() - start,
            loss_history=list(state.loss_history),
            learn_rate_history=list(state.learn_rate_history),
            stopped=stopped,
        )
