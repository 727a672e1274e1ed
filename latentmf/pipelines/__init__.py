"""End-to-end training pipelines."""

from .training import ExperimentResult, run_training  # noqa: F401
