"""Plotting helpers for training-run artefacts."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import matplotlib

# Force a non-interactive backend for headless environments (CI, servers, etc.).
matplotlib.use("Agg", force=True)
import matplotlib.pyplot as plt  # noqa: E402


def save_training_curves(
    loss_history: Sequence[float],
    learn_rate_history: Sequence[float] | None = None,
    *,
    output_path: Path | str,
    title: str = "Training loss / learning rate",
) -> Path:
    """
    Plot the per-epoch loss and, when given, the learning rate used for it.

    The loss goes on the left axis; the learning rate shares the epoch axis on
    a second panel since the two differ by orders of magnitude.
    """
    if not loss_history:
        raise ValueError("Loss history is empty; nothing to plot.")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with_rate = bool(learn_rate_history)
    fig, axes = plt.subplots(
        2 if with_rate else 1, 1, figsize=(8, 7 if with_rate else 4), sharex=True, squeeze=False
    )
    epochs = range(1, len(loss_history) + 1)

    loss_ax = axes[0][0]
    loss_ax.plot(epochs, list(loss_history), marker="o", linestyle="-", label="Loss")
    loss_ax.set_ylabel("Loss")
    loss_ax.set_title(title)
    loss_ax.grid(True, linestyle="--", linewidth=0.5, alpha=0.7)
    loss_ax.legend()

    if with_rate:
        rate_ax = axes[1][0]
        rate_epochs = range(1, len(learn_rate_history) + 1)
        rate_ax.plot(
            rate_epochs,
            list(learn_rate_history),
            marker=".",
            linestyle="-",
            color="tab:orange",
            label="Learning rate",
        )
        rate_ax.set_ylabel("Learning rate")
        rate_ax.grid(True, linestyle="--", linewidth=0.5, alpha=0.7)
        rate_ax.legend()

    axes[-1][0].set_xlabel("Epoch")
    fig.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close(fig)

    return output_path
