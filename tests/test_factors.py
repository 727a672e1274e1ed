import pytest
import torch

from latentmf.core import ConfigurationError, FactorPair, setup_factors


def test_setup_factors_allocates_requested_shapes():
    factors = setup_factors(4, 6, 3, init_mean=0.0, init_std=0.1)

    assert factors.user_factors.shape == (4, 3)
    assert factors.item_factors.shape == (6, 3)
    assert factors.num_users == 4
    assert factors.num_items == 6
    assert factors.num_factors == 3
    assert factors.is_finite()


@pytest.mark.parametrize(
    "num_users, num_items, num_factors",
    [(0, 5, 3), (5, 0, 3), (5, 5, 0), (-1, 5, 3)],
)
def test_setup_factors_rejects_non_positive_sizes(num_users, num_items, num_factors):
    with pytest.raises(ConfigurationError):
        setup_factors(num_users, num_items, num_factors)


def test_setup_factors_is_reproducible_with_generator():
    first = setup_factors(3, 4, 2, generator=torch.Generator().manual_seed(7))
    second = setup_factors(3, 4, 2, generator=torch.Generator().manual_seed(7))

    assert torch.equal(first.user_factors, second.user_factors)
    assert torch.equal(first.item_factors, second.item_factors)


def test_setup_factors_draws_around_init_mean():
    factors = setup_factors(
        200, 200, 20, init_mean=3.0, init_std=0.01, generator=torch.Generator().manual_seed(0)
    )

    assert factors.user_factors.mean().item() == pytest.approx(3.0, abs=0.01)
    assert factors.item_factors.std().item() == pytest.approx(0.01, rel=0.1)


def test_predict_is_row_inner_product():
    factors = FactorPair(
        user_factors=torch.tensor([[1.0, 2.0], [0.5, -1.0]]),
        item_factors=torch.tensor([[3.0, 4.0], [2.0, 2.0], [0.0, 1.0]]),
    )

    assert factors.predict(0, 0) == pytest.approx(11.0)
    assert factors.predict(1, 1) == pytest.approx(-1.0)
    assert factors.predict(1, 2) == pytest.approx(-1.0)


def test_predict_depends_only_on_the_two_rows():
    factors = FactorPair(
        user_factors=torch.tensor([[1.0, 2.0]]),
        item_factors=torch.tensor([[3.0, 4.0], [5.0, 6.0]]),
    )
    before = factors.predict(0, 0)

    factors.item_factors[1] = torch.tensor([100.0, -100.0])

    assert factors.predict(0, 0) == before
    assert factors.predict(0, 0) == factors.predict(0, 0)


@pytest.mark.parametrize("user_idx, item_idx", [(2, 0), (0, 3), (-1, 0), (0, -1)])
def test_predict_out_of_range_raises_index_error(user_idx, item_idx):
    factors = setup_factors(2, 3, 4)

    with pytest.raises(IndexError):
        factors.predict(user_idx, item_idx)


def test_factor_pair_requires_matching_width():
    with pytest.raises(ValueError):
        FactorPair(user_factors=torch.zeros((2, 3)), item_factors=torch.zeros((2, 4)))
