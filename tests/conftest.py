import numpy as np
import pytest

from mcda.problem import build_problem

# 4 alternatives x 2 criteria; rows 1, 2 and 3 are (90, 5), (100, 1) and (120, 2)
SCENARIO_TABLE = np.array([
    [100, 5],
    [90, 5],
    [100, 1],
    [120, 2],
], dtype=float)

# Example from the package documentation: one criterion of every shape
SIX_SHAPES_TABLE = np.array([
    [100, 1000, 9, 110, 300, 800],
    [90, 1100, 11, 120, 310, 801],
    [100, 1500, 12, 100, 340, 803],
    [120, 800, 13, 105, 360, 809],
], dtype=float)
SIX_SHAPES = ['GAIN', 'COST', 'NOT_PREDEFINED', 'A_TYPE', 'V_TYPE', 'NON_MON']

TOL = 1e-6


@pytest.fixture
def scenario_problem():
    return build_problem(SCENARIO_TABLE, ['GAIN', 'GAIN'], M=100, eps=0.01,
                         strict_preferences=[(1, 2)], weak_preferences=[(2, 3)])


@pytest.fixture
def six_shapes_problem():
    return build_problem(SIX_SHAPES_TABLE, SIX_SHAPES, M=100, eps=0.001,
                         strict_preferences=[(0, 1)], weak_preferences=[(1, 2)], indifferences=[(2, 3)])


def single_criterion_problem(values, shape, strict=None, weak=None, indifferent=None, eps=0.01):
    return build_problem(np.array(values, dtype=float).reshape(-1, 1), [shape], M=100, eps=eps,
                         strict_preferences=strict, weak_preferences=weak, indifferences=indifferent)
