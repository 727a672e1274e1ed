"""
Learning-rate adaptation between epochs.

Two policies are supported:

* bold driver (Gemulla et al., KDD 2011): grow the rate by 5% after an epoch
  that lowered the loss magnitude, halve it otherwise;
* constant decay (Niu et al., Hogwild!, NIPS 2011): multiply by ``decay`` each
  epoch when ``0 < decay < 1``.

Bold driver wins whenever it is enabled and a previous epoch exists. The result
is always clamped to ``max_learn_rate`` when that ceiling is positive.
"""

from __future__ import annotations

from dataclasses import dataclass

BOLD_DRIVER_INCREASE = 1.05
BOLD_DRIVER_DECREASE = 0.5


@dataclass(frozen=True)
class LearnRateScheduler:
    bold_driver: bool = False
    decay: float = 1.0
    max_learn_rate: float = 1000.0

    @property
    def decay_enabled(self) -> bool:
        return 0.0 < self.decay < 1.0

    def update(
        self,
        iteration: int,
        previous_loss: float | None,
        current_loss: float,
        current_rate: float,
    ) -> float:
        """Return the learning rate for the epoch following ``iteration``."""
        # A negative rate marks a fixed learning rate that must not be adapted.
        if current_rate < 0.0:
            return current_rate

        new_rate = current_rate
        if self.bold_driver and iteration > 1 and previous_loss is not None:
            if abs(previous_loss) > abs(current_loss):
                new_rate = current_rate * BOLD_DRIVER_INCREASE
            else:
                new_rate = current_rate * BOLD_DRIVER_DECREASE
        elif self.decay_enabled:
            new_rate = current_rate * self.decay

        if self.max_learn_rate > 0 and new_rate > self.max_learn_rate:
            new_rate = self.max_learn_rate
        return new_rate
