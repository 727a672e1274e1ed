"""
Biased matrix factorisation (Koren, KDD 2008) trained with SGD.

Predictions add the global rating mean and per-user / per-item biases to the
raw factor inner product::

    r_hat = global_mean + b_u + b_i + p_u . q_i
"""

from __future__ import annotations

import numpy as np
import torch

from latentmf.core import FactorPair, TrainingState, init_factor_table

from .base import MatrixFactorizationRecommender


class BiasedMFRecommender(MatrixFactorizationRecommender):
    user_biases: torch.Tensor | None = None
    item_biases: torch.Tensor | None = None

    def setup(self) -> None:
        super().setup()
        self.user_biases = init_factor_table(
            self.ratings.num_users,
            1,
            init_mean=self.config.init_mean,
            init_std=self.config.init_std,
            generator=self._torch_generator,
        ).squeeze(1)
        self.item_biases = init_factor_table(
            self.ratings.num_items,
            1,
            init_mean=self.config.init_mean,
            init_std=self.config.init_std,
            generator=self._torch_generator,
        ).squeeze(1)

    def predict(self, user_idx: int, item_idx: int) -> float:
        dot = super().predict(user_idx, item_idx)
        if self.user_biases is None or self.item_biases is None:
            raise RuntimeError(f"{self.name} is not set up; call setup() first.")
        return (
            self.global_mean
            + float(self.user_biases[user_idx])
            + float(self.item_biases[item_idx])
            + dot
        )

    def train_epoch(self, factors: FactorPair, state: TrainingState) -> float:
        if self.user_biases is None or self.item_biases is None:
            raise RuntimeError(f"{self.name} is not set up; call setup() first.")

        lr = self._step_size(state)
        reg_user = self.config.reg_user
        reg_item = self.config.reg_item
        reg_bias = self.config.reg_bias

        user_factors = factors.user_factors.numpy()
        item_factors = factors.item_factors.numpy()
        user_biases = self.user_biases.numpy()
        item_biases = self.item_biases.numpy()
        users = self.ratings.user_indices
        items = self.ratings.item_indices
        ratings = self.ratings.ratings

        loss = 0.0
        for idx in self._shuffled_order():
            u = users[idx]
            i = items[idx]
            p_u = user_factors[u].copy()
            q_i = item_factors[i].copy()
            b_u = float(user_biases[u])
            b_i = float(item_biases[i])

            predicted = self.global_mean + b_u + b_i + float(np.dot(p_u, q_i))
            error = float(ratings[idx]) - predicted
            loss += error * error

            user_biases[u] += lr * (error - reg_bias * b_u)
            item_biases[i] += lr * (error - reg_bias * b_i)
            loss += reg_bias * (b_u * b_u + b_i * b_i)

            user_factors[u] += lr * (error * q_i - reg_user * p_u)
            item_factors[i] += lr * (error * p_u - reg_item * q_i)
            loss += reg_user * float(np.dot(p_u, p_u)) + reg_item * float(np.dot(q_i, q_i))

        return 0.5 * loss
