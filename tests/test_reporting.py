from pathlib import Path

import pytest

from latentmf.reporting import save_training_curves


def test_save_training_curves_writes_png(tmp_path: Path):
    path = save_training_curves(
        [10.0, 8.0, 7.5],
        [0.01, 0.0105, 0.011],
        output_path=tmp_path / "nested" / "curves.png",
    )

    assert path.exists()
    assert path.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"


def test_save_training_curves_without_learn_rate(tmp_path: Path):
    path = save_training_curves([3.0, 2.0], output_path=tmp_path / "loss.png")

    assert path.exists()


def test_save_training_curves_rejects_empty_history(tmp_path: Path):
    with pytest.raises(ValueError):
        save_training_curves([], output_path=tmp_path / "empty.png")
