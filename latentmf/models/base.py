"""
Base class for SGD matrix-factorisation recommenders.

Subclasses implement :meth:`MatrixFactorizationRecommender.train_epoch`, one
pass over the ratings that updates the factor tables in place and returns the
epoch loss. Everything around that step (factor initialisation, the
dot-product predictor, convergence and learning-rate adaptation) lives here and
in :mod:`latentmf.core`.
"""

from __future__ import annotations

import abc

import numpy as np
import torch
from loguru import logger

from latentmf.core import (
    ConvergenceMonitor,
    ConvergenceStatus,
    FactorizationConfig,
    FactorPair,
    LearnRateScheduler,
    TrainingLoopController,
    TrainingResult,
    TrainingState,
    setup_factors,
)
from latentmf.data import RatingMatrix


class MatrixFactorizationRecommender(abc.ABC):
    """Recommender with user and item latent factors (SVD-style models)."""

    def __init__(self, config: FactorizationConfig, ratings: RatingMatrix) -> None:
        self.config = config
        self.ratings = ratings
        self.global_mean = 0.0
        self.factors: FactorPair | None = None
        self.state: TrainingState | None = None
        self.monitor = ConvergenceMonitor(algorithm_name=type(self).__name__)
        self.scheduler = LearnRateScheduler(
            bold_driver=config.bold_driver,
            decay=config.decay,
            max_learn_rate=config.max_learn_rate,
        )
        self._controller: TrainingLoopController | None = None
        self._torch_generator: torch.Generator | None = None
        self._rng = np.random.default_rng(config.seed)

    @property
    def name(self) -> str:
        return type(self).__name__

    def setup(self) -> None:
        """Initialise factor tables and fresh training state for a new run."""
        if self.config.seed is not None:
            self._torch_generator = torch.Generator().manual_seed(self.config.seed)
            self._rng = np.random.default_rng(self.config.seed)

        self.global_mean = self.ratings.mean()
        self.factors = setup_factors(
            self.ratings.num_users,
            self.ratings.num_items,
            self.config.num_factors,
            self.config.init_mean,
            self.config.init_std,
            generator=self._torch_generator,
        )
        self.state = TrainingState(learn_rate=self.config.learn_rate)
        self.monitor.reset()
        logger.debug(
            "{} setup | users={} items={} factors={} global_mean={:.4f}",
            self.name,
            self.factors.num_users,
            self.factors.num_items,
            self.factors.num_factors,
            self.global_mean,
        )

    def predict(self, user_idx: int, item_idx: int) -> float:
        """Raw inner product of the user and item factors; subclasses may add biases."""
        return self._require_factors().predict(user_idx, item_idx)

    def evaluate_convergence(self, iteration: int) -> bool:
        """
        Run the convergence check on the loss recorded for ``iteration``.

        Returns True when converged. Raises
        :class:`~latentmf.core.DivergenceError` on a NaN or infinite loss.
        """
        state = self._require_state()
        if state.current_loss is None:
            raise RuntimeError("No loss has been recorded yet; run an epoch first.")
        status = self.monitor.evaluate(
            iteration, state.current_loss, state.previous_loss, verbose=self.config.verbose
        )
        return status is ConvergenceStatus.CONVERGED

    def update_learn_rate(self, iteration: int) -> float:
        """Adapt ``state.learn_rate`` after ``iteration`` and return the new value."""
        state = self._require_state()
        if state.current_loss is None:
            raise RuntimeError("No loss has been recorded yet; run an epoch first.")
        state.learn_rate = self.scheduler.update(
            iteration, state.previous_loss, state.current_loss, state.learn_rate
        )
        return state.learn_rate

    def train(self) -> TrainingResult:
        """Start a fresh run: re-initialise factors and state, then loop to completion."""
        self.setup()
        self._controller = TrainingLoopController(
            num_iterations=self.config.num_iterations,
            monitor=self.monitor,
            scheduler=self.scheduler,
            verbose=self.config.verbose,
        )
        logger.info(
            "Training {} for at most {} iterations (learn_rate={}, bold_driver={}, decay={})",
            self.name,
            self.config.num_iterations,
            self.config.learn_rate,
            self.config.bold_driver,
            self.config.decay,
        )
        return self._controller.run(self, self._require_factors(), self._require_state())

    def request_stop(self) -> None:
        """Stop a running :meth:`train` call at the next epoch boundary."""
        if self._controller is not None:
            self._controller.request_stop()

    @abc.abstractmethod
    def train_epoch(self, factors: FactorPair, state: TrainingState) -> float:
        """Run one pass over the ratings and return the epoch loss."""

    def _shuffled_order(self) -> np.ndarray:
        return self._rng.permutation(self.ratings.num_ratings)

    @staticmethod
    def _step_size(state: TrainingState) -> float:
        # Negative rates are the "fixed, never adapted" sentinel.
        return abs(state.learn_rate)

    def _require_factors(self) -> FactorPair:
        if self.factors is None:
            raise RuntimeError(f"{self.name} is not set up; call setup() first.")
        return self.factors

    def _require_state(self) -> TrainingState:
        if self.state is None:
            raise RuntimeError(f"{self.name} is not set up; call setup() first.")
        return self.state
