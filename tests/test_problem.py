import numpy as np
import pytest

from common.errors import ShapeError, ParameterError, PreferenceInconsistencyError, UtaGmsError
from mcda.problem import CriterionShape, build_problem
from tests.conftest import SCENARIO_TABLE


def make(**kwargs):
    args = dict(alternatives=SCENARIO_TABLE, shapes=['GAIN', 'GAIN'], M=100, eps=0.01,
                strict_preferences=[(1, 2)])
    args.update(kwargs)
    return build_problem(**args)


def test_problem_fields(scenario_problem):
    assert scenario_problem.alternatives_number == 4
    assert scenario_problem.criteria_number == 2
    assert scenario_problem.shapes == (CriterionShape.GAIN, CriterionShape.GAIN)
    assert scenario_problem.strict_preferences == ((1, 2),)
    assert scenario_problem.weak_preferences == ((2, 3),)
    assert scenario_problem.indifferences == ()
    np.testing.assert_array_equal(scenario_problem.level_numbers, [3, 3])
    np.testing.assert_array_equal(scenario_problem.alternatives_indexes[3], [2, 1])


def test_problem_arrays_are_read_only(scenario_problem):
    with pytest.raises(ValueError):
        scenario_problem.alternatives[0, 0] = 1.0


@pytest.mark.parametrize("alternatives", [
    None,
    [[1, 2], [3, 4]],
    [1, 2, 3],
    [[1, 2], [3, np.nan], [5, 6]],
    [['a', 'b'], ['c', 'd'], ['e', 'f']],
])
def test_bad_alternatives(alternatives):
    with pytest.raises(ShapeError):
        build_problem(alternatives, ['GAIN', 'GAIN'], 100, 0.01, strict_preferences=[(0, 1)])


def test_non_finite_column_is_reported():
    with pytest.raises(ShapeError) as exc:
        build_problem([[1, 2], [3, np.inf], [5, 6]], ['GAIN', 'GAIN'], 100, 0.01, strict_preferences=[(0, 1)])
    assert exc.value.criterion == 1


@pytest.mark.parametrize("shapes", [['GAIN'], ['GAIN', 'GAIN', 'COST'], ['GAIN', 'LINEAR'], 'GAIN', None])
def test_bad_shapes(shapes):
    with pytest.raises(ShapeError):
        make(shapes=shapes)


def test_shapes_accept_enum_members():
    problem = make(shapes=[CriterionShape.COST, 'NON_MON'])
    assert problem.shapes == (CriterionShape.COST, CriterionShape.NON_MON)


@pytest.mark.parametrize("kwargs", [{'M': 0}, {'M': -1}, {'M': None}, {'eps': 0}, {'eps': 1}, {'eps': -0.1}])
def test_bad_parameters(kwargs):
    with pytest.raises(ParameterError):
        make(**kwargs)


@pytest.mark.parametrize("kwargs", [
    {'strict_preferences': [(1, 1)]},
    {'strict_preferences': [(1, 4)]},
    {'strict_preferences': [(-1, 0)]},
    {'strict_preferences': [(1, 2), (2, 1)]},
    {'strict_preferences': [(1, 2)], 'indifferences': [(2, 1)]},
    {'strict_preferences': [(1, 2)], 'weak_preferences': [(1, 2)]},
    {'strict_preferences': [(1, 2)], 'weak_preferences': [(2, 1)]},
    {'strict_preferences': None, 'weak_preferences': [(0, 3)], 'indifferences': [(3, 0)]},
    {'strict_preferences': None},
])
def test_inconsistent_preferences(kwargs):
    with pytest.raises(PreferenceInconsistencyError):
        make(**kwargs)


def test_contradiction_reports_pair():
    with pytest.raises(PreferenceInconsistencyError) as exc:
        make(strict_preferences=[(1, 2)], indifferences=[(1, 2)])
    assert exc.value.pair == (1, 2)
    assert isinstance(exc.value, UtaGmsError)


@pytest.mark.parametrize("pairs", [[(0, 1, 2)], [[0.5, 1]], [['a', 'b']]])
def test_malformed_pair_tables(pairs):
    with pytest.raises(ShapeError):
        make(strict_preferences=pairs)


def test_duplicates_are_dropped():
    problem = make(strict_preferences=[(1, 2), (1, 2), (0, 3)],
                   weak_preferences=[(2, 3), (2, 3)],
                   indifferences=[(0, 1), (1, 0)])
    assert problem.strict_preferences == ((1, 2), (0, 3))
    assert problem.weak_preferences == ((2, 3),)
    assert problem.indifferences == ((0, 1),)


def test_weak_preference_both_ways_is_allowed():
    problem = make(strict_preferences=None, weak_preferences=[(0, 1), (1, 0)])
    assert problem.weak_preferences == ((0, 1), (1, 0))


def test_empty_pair_table_counts_as_missing():
    problem = make(weak_preferences=np.empty((0, 2)))
    assert problem.weak_preferences == ()
