import pytest

from latentmf.core import LearnRateScheduler


def test_bold_driver_increases_rate_after_improvement():
    scheduler = LearnRateScheduler(bold_driver=True)

    assert scheduler.update(2, 10.0, 8.0, 0.01) == pytest.approx(0.0105)


def test_bold_driver_halves_rate_after_worse_loss():
    scheduler = LearnRateScheduler(bold_driver=True)

    assert scheduler.update(2, 5.0, 9.0, 0.01) == pytest.approx(0.005)


def test_bold_driver_halves_rate_when_loss_unchanged():
    scheduler = LearnRateScheduler(bold_driver=True)

    assert scheduler.update(4, 3.0, 3.0, 0.02) == pytest.approx(0.01)


def test_bold_driver_compares_loss_magnitudes():
    scheduler = LearnRateScheduler(bold_driver=True)

    assert scheduler.update(2, -10.0, 8.0, 0.01) == pytest.approx(0.0105)


def test_bold_driver_skips_first_iteration():
    scheduler = LearnRateScheduler(bold_driver=True)

    assert scheduler.update(1, 10.0, 8.0, 0.01) == 0.01
    assert scheduler.update(1, 5.0, 9.0, 0.01) == 0.01


def test_first_iteration_with_bold_driver_falls_through_to_decay():
    scheduler = LearnRateScheduler(bold_driver=True, decay=0.5)

    assert scheduler.update(1, None, 8.0, 0.1) == pytest.approx(0.05)
    # Later iterations use bold driver only.
    assert scheduler.update(2, 10.0, 8.0, 0.1) == pytest.approx(0.105)


def test_constant_decay():
    scheduler = LearnRateScheduler(decay=0.9)

    assert scheduler.update(3, 1.0, 0.5, 0.1) == pytest.approx(0.09)


@pytest.mark.parametrize("decay", [1.0, 0.0, 1.5])
def test_decay_outside_open_unit_interval_is_inactive(decay):
    scheduler = LearnRateScheduler(decay=decay)

    assert scheduler.update(3, 1.0, 0.5, 0.1) == 0.1


def test_new_rate_is_clamped_to_max_learn_rate():
    scheduler = LearnRateScheduler(bold_driver=True, max_learn_rate=0.0102)

    assert scheduler.update(2, 10.0, 8.0, 0.01) == 0.0102


def test_current_rate_above_max_is_clamped_without_adaptation():
    scheduler = LearnRateScheduler(max_learn_rate=0.5)

    assert scheduler.update(1, None, 1.0, 2.0) == 0.5


def test_non_positive_max_disables_clamp():
    scheduler = LearnRateScheduler(bold_driver=True, max_learn_rate=0.0)

    assert scheduler.update(2, 10.0, 8.0, 5000.0) == pytest.approx(5250.0)


@pytest.mark.parametrize(
    "scheduler",
    [
        LearnRateScheduler(bold_driver=True),
        LearnRateScheduler(decay=0.5),
        LearnRateScheduler(bold_driver=True, decay=0.5, max_learn_rate=1e-6),
    ],
)
def test_negative_rate_is_returned_unchanged(scheduler):
    assert scheduler.update(2, 10.0, 8.0, -0.01) == -0.01
    assert scheduler.update(1, None, 8.0, -0.01) == -0.01
