"""Reporting helpers for training runs."""

from .plots import save_training_curves  # noqa: F401
