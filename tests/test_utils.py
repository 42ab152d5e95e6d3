import json
import os

import numpy as np
import pytest

from common import utils
from tests.conftest import SCENARIO_TABLE


def test_save_and_read_problem(tmp_path):
    problem_dir = str(tmp_path / "run_000")
    utils.save_problem(problem_dir, SCENARIO_TABLE, ['GAIN', 'COST'], 50, 0.02,
                       strict_preferences=[(1, 2)], indifferences=[(0, 3)], true_utility=[0.1, 0.2, 0.3, 0.4])

    problem, Us = utils.read_problem(problem_dir)
    np.testing.assert_array_equal(problem.alternatives, SCENARIO_TABLE)
    assert [str(s) for s in problem.shapes] == ['GAIN', 'COST']
    assert problem.M == 50 and problem.eps == 0.02
    assert problem.strict_preferences == ((1, 2),)
    assert problem.weak_preferences == ()
    assert problem.indifferences == ((0, 3),)
    np.testing.assert_allclose(Us, [0.1, 0.2, 0.3, 0.4])


def test_read_problem_without_hidden_utility(tmp_path):
    utils.save_problem(str(tmp_path), SCENARIO_TABLE, ['GAIN', 'GAIN'], 100, 0.01, weak_preferences=[(0, 1), (2, 3)])
    problem, Us = utils.read_problem(str(tmp_path))
    assert Us is None
    assert problem.weak_preferences == ((0, 1), (2, 3))


def test_read_missing_problem(tmp_path):
    with pytest.raises(FileNotFoundError):
        utils.read_problem(str(tmp_path / "nothing"))
    with pytest.raises(FileNotFoundError):
        utils.read_dataset(str(tmp_path), 4, 2, 50)


def test_read_dataset_is_sorted(tmp_path):
    config_dir = utils.dataset_dir(str(tmp_path), 4, 2, 50)
    for run in ("run_002", "run_000", "run_001"):
        utils.save_problem(os.path.join(config_dir, run), SCENARIO_TABLE, ['GAIN', 'GAIN'], 100, 0.01,
                           strict_preferences=[(3, 1)])
    os.makedirs(os.path.join(config_dir, "notes"))
    runs = utils.read_dataset(str(tmp_path), 4, 2, 50)
    assert [name for name, _, _ in runs] == ["run_000", "run_001", "run_002"]


def test_combinations():
    pairs = utils.get_combinations(np.arange(4))
    assert pairs.shape == (6, 2)
    assert np.all(pairs[:, 0] < pairs[:, 1])


def test_robust_sigmoid_saturates():
    assert utils.robust_sigmoid(np.inf) == 1.0
    assert utils.robust_sigmoid(-1000.0) == pytest.approx(0.0)
    assert utils.robust_sigmoid(0.0) == 0.5
