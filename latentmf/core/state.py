"""Per-run scalar bookkeeping for the epoch loop."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class TrainingState:
    """
    Mutable state of one training run.

    ``previous_loss`` is ``None`` until a second epoch has been reported.
    ``iteration`` is the 1-based index of the epoch currently being trained.
    """

    learn_rate: float
    current_loss: float | None = None
    previous_loss: float | None = None
    iteration: int = 1
    loss_history: list[float] = field(default_factory=list)
    learn_rate_history: list[float] = field(default_factory=list)

    def record_loss(self, loss: float) -> None:
        """Shift the current loss into ``previous_loss`` and store the new one."""
        self.previous_loss = self.current_loss
        self.current_loss = float(loss)
        self.loss_history.append(self.current_loss)
        self.learn_rate_history.append(self.learn_rate)
