"""YAML configuration loading and dotted-key access for training runs."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Mapping, MutableMapping

import yaml

_MISSING = object()


def load_config(config_path: Path | str) -> dict[str, Any]:
    """
    Parse a YAML training configuration into a nested dictionary.

    An empty file yields an empty mapping; a document whose top level is not a
    mapping (e.g. a bare list) is rejected.
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as handle:
        payload = yaml.safe_load(handle)

    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise ValueError(
            f"Top level of {config_path} must be a mapping, got {type(payload).__name__}"
        )
    return dict(payload)


def clone_config(config: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-copy a configuration so sweep overrides never leak between runs."""
    return copy.deepcopy(dict(config))


def set_by_dotted_path(
    config: MutableMapping[str, Any],
    dotted_key: str,
    value: Any,
) -> None:
    """
    Assign ``value`` at ``dotted_key``, creating intermediate sections.

    Examples
    --------
    >>> cfg = {"training": {"learn_rate": 0.01}}
    >>> set_by_dotted_path(cfg, "training.learn_rate", 0.05)
    >>> cfg["training"]["learn_rate"]
    0.05
    """
    *parents, leaf = dotted_key.split(".")
    section: MutableMapping[str, Any] = config
    for key in parents:
        child = section.get(key)
        if not isinstance(child, MutableMapping):
            child = {}
            section[key] = child
        section = child
    section[leaf] = value


def get_by_dotted_path(config: Mapping[str, Any], dotted_key: str, default: Any = None) -> Any:
    """Return the value at ``dotted_key`` or ``default`` when any segment is absent."""
    value = _lookup(config, dotted_key)
    return default if value is _MISSING else value


def has_dotted_path(config: Mapping[str, Any], dotted_key: str) -> bool:
    return _lookup(config, dotted_key) is not _MISSING


def apply_overrides(
    config: Mapping[str, Any], overrides: Mapping[str, Any]
) -> dict[str, Any]:
    """Return a cloned config with every ``dotted.key -> value`` override applied."""
    updated = clone_config(config)
    for key, value in overrides.items():
        set_by_dotted_path(updated, key, value)
    return updated


def _lookup(config: Mapping[str, Any], dotted_key: str) -> Any:
    current: Any = config
    for key in dotted_key.split("."):
        if not isinstance(current, Mapping) or key not in current:
            return _MISSING
        current = current[key]
    return current
