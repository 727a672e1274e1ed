"""
Training orchestration entry point.

Loads the rating data named in the configuration, builds the requested
factorisation model, runs the epoch loop, and optionally writes training
curves and a sweep summary. Hyper-parameter sweeps run each combination on a
cloned config; a combination that diverges is recorded rather than aborting
the whole sweep.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import product
from pathlib import Path
from typing import Any, Mapping, Sequence

from loguru import logger

from latentmf.core import DivergenceError, FactorizationConfig, TrainingResult
from latentmf.data import RatingMatrix, load_ratings
from latentmf.models import build_recommender
from latentmf.reporting import save_training_curves
from latentmf.utils import apply_overrides, get_by_dotted_path


@dataclass
class ExperimentResult:
    name: str
    model_name: str
    config: Mapping[str, Any]
    training: TrainingResult | None
    overrides: Mapping[str, Any] | None = None
    diverged: bool = False
    error: str | None = None
    curves_path: Path | None = None

    @property
    def converged(self) -> bool:
        return self.training is not None and self.training.converged


def _load_ratings_from_config(config: Mapping[str, Any]) -> RatingMatrix:
    data_cfg = config.get("data", {})
    ratings_file = data_cfg.get("ratings_file")
    if not ratings_file:
        raise ValueError("data.ratings_file must point at a ratings CSV.")
    root = Path(data_cfg.get("root", "."))
    return load_ratings(
        root / ratings_file,
        user_col=data_cfg.get("user_col", "user_id"),
        item_col=data_cfg.get("item_col", "item_id"),
        rating_col=data_cfg.get("rating_col", "rating"),
        limit=data_cfg.get("limit"),
    )


def _run_single_experiment(
    config: Mapping[str, Any],
    ratings: RatingMatrix,
    *,
    overrides: Mapping[str, Any] | None = None,
    tolerate_divergence: bool = False,
) -> ExperimentResult:
    experiment_name = str(get_by_dotted_path(config, "experiment.name", "experiment"))
    model_name = str(get_by_dotted_path(config, "model.name", "regsvd"))
    fact_config = FactorizationConfig.from_mapping(config)

    recommender = build_recommender(model_name, fact_config, ratings)
    logger.info(
        "Experiment '{}' | model={} users={} items={} ratings={}",
        experiment_name,
        recommender.name,
        ratings.num_users,
        ratings.num_items,
        ratings.num_ratings,
    )
    if overrides:
        logger.info("Overrides: {}", dict(overrides))

    try:
        training = recommender.train()
    except DivergenceError as exc:
        if not tolerate_divergence:
            logger.exception("Experiment '{}' diverged", experiment_name)
            raise
        logger.error(
            "Experiment '{}' diverged at iteration {}: {}",
            experiment_name,
            exc.iteration,
            exc.message,
        )
        return ExperimentResult(
            name=experiment_name,
            model_name=recommender.name,
            config=config,
            training=None,
            overrides=overrides,
            diverged=True,
            error=exc.message,
        )

    logger.info(
        "Experiment '{}' finished | status={} epochs={} final_loss={} final_learn_rate={} ({:.2f}s)",
        experiment_name,
        training.status.value,
        training.epochs_run,
        training.final_loss,
        training.final_learn_rate,
        training.runtime_seconds,
    )

    curves_path: Path | None = None
    output_dir = get_by_dotted_path(config, "experiment.output_dir")
    if output_dir and training.loss_history:
        curves_path = save_training_curves(
            training.loss_history,
            training.learn_rate_history,
            output_path=Path(output_dir) / f"{experiment_name}_curves.png",
            title=f"{recommender.name} ({experiment_name})",
        )
        logger.info("Saved training curves to {}", curves_path)

    return ExperimentResult(
        name=experiment_name,
        model_name=recommender.name,
        config=config,
        training=training,
        overrides=overrides,
        curves_path=curves_path,
    )


def _run_experiment_grid(
    config: Mapping[str, Any],
    grid: Mapping[str, Sequence[Any]],
    ratings: RatingMatrix,
) -> list[ExperimentResult]:
    keys = list(grid.keys())
    combinations = list(product(*[grid[key] for key in keys]))
    base_name = str(get_by_dotted_path(config, "experiment.name", "experiment"))
    results: list[ExperimentResult] = []

    logger.info("Running sweep '{}' over {} combinations", base_name, len(combinations))
    for idx, combination in enumerate(combinations):
        overrides = dict(zip(keys, combination))
        run_config = apply_overrides(
            config, {**overrides, "experiment.name": f"{base_name}_sweep{idx:02d}"}
        )
        results.append(
            _run_single_experiment(
                run_config, ratings, overrides=overrides, tolerate_divergence=True
            )
        )

    return results


def _write_sweep_report(report_path: Path, results: Sequence[ExperimentResult]) -> None:
    report_path.parent.mkdir(parents=True, exist_ok=True)
    lines = [
        "# Sweep Summary",
        "",
        "| Experiment | Model | Overrides | Status | Epochs | Final loss | Final learn rate |",
        "| --- | --- | --- | --- | --- | --- | --- |",
    ]
    for result in results:
        overrides = ", ".join(f"{k}={v}" for k, v in (result.overrides or {}).items()) or "-"
        if result.training is None:
            status = "diverged" if result.diverged else "failed"
            lines.append(f"| {result.name} | {result.model_name} | {overrides} | {status} | - | - | - |")
            continue
        training = result.training
        final_loss = "-" if training.final_loss is None else f"{training.final_loss:.6f}"
        lines.append(
            f"| {result.name} | {result.model_name} | {overrides} | {training.status.value} | "
            f"{training.epochs_run} | {final_loss} | {training.final_learn_rate:.6g} |"
        )
    report_path.write_text("\n".join(lines) + "\n", encoding="utf-8")


def run_training(
    config: Mapping[str, Any],
    *,
    ratings: RatingMatrix | None = None,
) -> list[ExperimentResult] | ExperimentResult:
    """
    Run one experiment, or a sweep when ``experiment.grid`` is non-empty.

    ``ratings`` can be passed directly; otherwise ``data.ratings_file`` is read.
    """
    if ratings is None:
        ratings = _load_ratings_from_config(config)

    grid = get_by_dotted_path(config, "experiment.grid") or {}
    if grid:
        results = _run_experiment_grid(config, grid, ratings)
    else:
        results = [_run_single_experiment(config, ratings)]

    report_path = get_by_dotted_path(config, "experiment.sweep_report")
    if report_path:
        _write_sweep_report(Path(report_path), results)
        logger.info("Wrote sweep summary to {}", report_path)

    if len(results) == 1:
        return results[0]
    return results
