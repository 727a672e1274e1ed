"""
Regularised SVD trained with per-rating stochastic gradient descent.

For every observed rating ``r_ui``::

    e    = r_ui - p_u . q_i
    p_u += lr * (e * q_i - reg_user * p_u)
    q_i += lr * (e * p_u - reg_item * q_i)

The epoch loss is half the sum of squared errors plus the L2 penalties of the
rows touched by each sample.
"""

from __future__ import annotations

import numpy as np

from latentmf.core import FactorPair, TrainingState

from .base import MatrixFactorizationRecommender


class RegSVDRecommender(MatrixFactorizationRecommender):
    def train_epoch(self, factors: FactorPair, state: TrainingState) -> float:
        lr = self._step_size(state)
        reg_user = self.config.reg_user
        reg_item = self.config.reg_item

        # numpy views share memory with the tensors, so row writes land in place.
        user_factors = factors.user_factors.numpy()
        item_factors = factors.item_factors.numpy()
        users = self.ratings.user_indices
        items = self.ratings.item_indices
        ratings = self.ratings.ratings

        loss = 0.0
        for idx in self._shuffled_order():
            u = users[idx]
            i = items[idx]
            p_u = user_factors[u].copy()
            q_i = item_factors[i].copy()

            error = float(ratings[idx] - np.dot(p_u, q_i))
            loss += error * error

            user_factors[u] += lr * (error * q_i - reg_user * p_u)
            item_factors[i] += lr * (error * p_u - reg_item * q_i)

            loss += reg_user * float(np.dot(p_u, p_u)) + reg_item * float(np.dot(q_i, q_i))

        return 0.5 * loss
