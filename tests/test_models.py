import numpy as np
import pytest

from mcda.models import LevelIndex
from tests.conftest import SCENARIO_TABLE


def test_characteristic_points_are_sorted_distinct_values():
    levels = LevelIndex.from_alternatives(SCENARIO_TABLE)
    np.testing.assert_array_equal(levels.ch_p[0], [90, 100, 120])
    np.testing.assert_array_equal(levels.ch_p[1], [1, 2, 5])
    np.testing.assert_array_equal(levels.level_numbers, [3, 3])
    np.testing.assert_array_equal(levels.offsets, [0, 3])
    assert levels.total_points == 6


def test_ranks():
    levels = LevelIndex.from_alternatives(SCENARIO_TABLE)
    np.testing.assert_array_equal(levels.ranks(SCENARIO_TABLE), [[1, 2], [0, 2], [1, 0], [2, 1]])


def test_ranks_rejects_unknown_value():
    levels = LevelIndex.from_alternatives(SCENARIO_TABLE)
    with pytest.raises(ValueError):
        levels.ranks([[95, 5]])


def test_evaluate_interpolates_between_points():
    levels = LevelIndex([[0.0, 10.0], [1.0, 2.0, 3.0]])
    marginal = [np.array([0.0, 0.4]), np.array([0.0, 0.5, 0.6])]
    values = levels.evaluate(marginal, [[5.0, 2.0], [10.0, 3.0], [0.0, 1.5]])
    np.testing.assert_allclose(values, [0.2 + 0.5, 0.4 + 0.6, 0.0 + 0.25])
