import numpy as np
import pytest

from common.errors import InfeasibleModelError, PreferenceInconsistencyError
from inference import layout as lay
from inference.engine import RelationEngine, calc_solution
from inference.solver import SolverAdapter, STATUS_OPTIMAL
from mcda.problem import build_problem
from tests.conftest import SCENARIO_TABLE, TOL, single_criterion_problem


def assert_judgments_hold(problem, values):
    for row in np.atleast_2d(values):
        for a, b in problem.strict_preferences:
            assert row[a] - row[b] >= problem.eps - TOL
        for a, b in problem.weak_preferences:
            assert row[a] >= row[b] - TOL
        for a, b in problem.indifferences:
            assert abs(row[a] - row[b]) <= TOL

# ----------------------------------------------------------------------
# GAIN / COST
# ----------------------------------------------------------------------

def test_scenario_is_feasible(scenario_problem):
    engine = RelationEngine(scenario_problem)
    assert engine.solver.solve(engine.lpmodel, scenario_problem.eps).status == STATUS_OPTIMAL

    solution = engine.run()
    # no structural binary is free, so one round settles it
    assert solution.solutions_count == 1
    assert_judgments_hold(scenario_problem, solution.additive_value_functions)
    assert solution.solutions[0][engine.layout.eps_index()] == pytest.approx(0.01)
    assert list(solution.final_criteria_types[0]) == ['GAIN', 'GAIN']


def test_scenario_marginal_values_are_normalized(scenario_problem):
    solution = calc_solution(scenario_problem)
    marginal = solution.marginal_values[0]
    for u in marginal:
        assert u[0] == pytest.approx(0.0, abs=TOL)
        assert np.all(np.diff(u) >= -TOL)
    assert sum(u[-1] for u in marginal) == pytest.approx(1.0)


def test_additive_values_match_level_interpolation(scenario_problem):
    solution = calc_solution(scenario_problem)
    recomputed = scenario_problem.levels.evaluate(solution.marginal_values[0], scenario_problem.alternatives)
    np.testing.assert_allclose(recomputed, solution.additive_value_functions[0], atol=1e-9)


def test_contradiction_is_rejected_before_solving():
    with pytest.raises(PreferenceInconsistencyError):
        build_problem(SCENARIO_TABLE, ['GAIN', 'GAIN'], 100, 0.01,
                      strict_preferences=[(1, 2)], indifferences=[(1, 2)])


def test_indifference_is_an_equality():
    problem = build_problem(SCENARIO_TABLE, ['GAIN', 'COST'], 100, 0.01,
                            strict_preferences=[(3, 1)], indifferences=[(0, 2)])
    solution = calc_solution(problem)
    assert solution
    assert_judgments_hold(problem, solution.additive_value_functions)


def test_infeasible_judgments():
    # u is non-decreasing, so the lower evaluation cannot be strictly better
    problem = single_criterion_problem([1, 2, 3], 'GAIN', strict=[(0, 1)])
    solution = calc_solution(problem)
    assert not solution
    assert solution.solutions_count == 0
    assert solution.possible_relations == set()

    with pytest.raises(InfeasibleModelError) as exc:
        calc_solution(problem, raise_on_infeasible=True)
    assert exc.value.status != STATUS_OPTIMAL

    with pytest.raises(InfeasibleModelError):
        next(RelationEngine(problem).iter_solutions())

# ----------------------------------------------------------------------
# NOT_PREDEFINED
# ----------------------------------------------------------------------

def test_not_predefined_resolves_to_gain():
    problem = single_criterion_problem([1, 2, 3, 4], 'NOT_PREDEFINED', strict=[(1, 0), (2, 1), (3, 2)])
    solution = calc_solution(problem)
    assert solution.solutions_count >= 1
    assert all(types[0] == 'GAIN' for types in solution.final_criteria_types)
    assert_judgments_hold(problem, solution.additive_value_functions)


def test_not_predefined_resolves_to_cost():
    problem = single_criterion_problem([1, 2, 3, 4], 'NOT_PREDEFINED', strict=[(0, 1), (1, 2), (2, 3)])
    solution = calc_solution(problem)
    assert solution.solutions_count >= 1
    assert all(types[0] == 'COST' for types in solution.final_criteria_types)
    marginal = solution.marginal_values[0][0]
    assert marginal[0] == pytest.approx(1.0, abs=1e-5)
    assert marginal[-1] == pytest.approx(0.0, abs=1e-5)

# ----------------------------------------------------------------------
# A_TYPE / V_TYPE / NON_MON
# ----------------------------------------------------------------------

def test_a_type_allows_an_interior_peak():
    values = [1, 2, 3, 4, 5]
    strict = [(2, 0), (2, 4)]
    assert not calc_solution(single_criterion_problem(values, 'GAIN', strict=strict))

    problem = single_criterion_problem(values, 'A_TYPE', strict=strict)
    solution = calc_solution(problem)
    assert solution
    assert_judgments_hold(problem, solution.additive_value_functions)
    for marginal, peak in zip(solution.marginal_values, solution.extreme_points[:, 0]):
        u = marginal[0]
        assert 1 <= peak <= 3
        assert np.all(np.diff(u[:peak + 1]) >= -TOL)
        assert np.all(np.diff(u[peak:]) <= TOL)
        assert u[peak] == pytest.approx(1.0, abs=1e-5)
        assert min(u[0], u[-1]) == pytest.approx(0.0, abs=1e-5)
    assert all(types[0] == 'A_TYPE' for types in solution.final_criteria_types)


def test_v_type_allows_an_interior_trough():
    values = [1, 2, 3, 4, 5]
    strict = [(0, 2), (4, 2)]
    assert not calc_solution(single_criterion_problem(values, 'COST', strict=strict))

    problem = single_criterion_problem(values, 'V_TYPE', strict=strict)
    solution = calc_solution(problem)
    assert solution
    assert_judgments_hold(problem, solution.additive_value_functions)
    for marginal, trough in zip(solution.marginal_values, solution.extreme_points[:, 0]):
        u = marginal[0]
        assert 1 <= trough <= 3
        assert u[trough] == pytest.approx(0.0, abs=1e-5)
        assert max(u[0], u[-1]) == pytest.approx(1.0, abs=1e-5)


def test_non_mon_fits_a_zigzag():
    values = [1, 2, 3, 4, 5]
    strict = [(1, 0), (1, 2), (3, 2), (3, 4)]
    assert not calc_solution(single_criterion_problem(values, 'A_TYPE', strict=strict))

    problem = single_criterion_problem(values, 'NON_MON', strict=strict)
    solution = calc_solution(problem)
    assert solution
    assert_judgments_hold(problem, solution.additive_value_functions)
    for marginal in solution.marginal_values:
        u = marginal[0]
        assert u.min() == pytest.approx(0.0, abs=1e-5)
        assert u.max() == pytest.approx(1.0, abs=1e-5)
    assert solution.extreme_points[0, 0] == -1

# ----------------------------------------------------------------------
# Enumeration
# ----------------------------------------------------------------------

def test_every_enumerated_function_is_compatible(six_shapes_problem):
    solution = calc_solution(six_shapes_problem, max_solutions=10)
    assert 1 <= solution.solutions_count <= 10
    assert_judgments_hold(six_shapes_problem, solution.additive_value_functions)
    assert solution.necessary_relations <= solution.possible_relations
    assert (0, 1) in solution.necessary_relations
    assert (1, 0) not in solution.possible_relations
    assert solution.final_criteria_types.shape == (solution.solutions_count, 6)
    assert solution.final_criteria_types[0, 2] in ('GAIN', 'COST')


@pytest.mark.parametrize("exclusion", ['ones', 'full'])
def test_enumerated_structures_are_distinct(six_shapes_problem, exclusion):
    engine = RelationEngine(six_shapes_problem, exclusion=exclusion)
    solutions = list(engine.iter_solutions(max_solutions=8))
    structural = engine.layout.structural_indexes()
    patterns = {tuple(np.round(s[structural]).astype(int)) for s in solutions}
    assert len(patterns) == len(solutions)


def test_enumeration_cap(six_shapes_problem):
    adapter = SolverAdapter()
    solution = calc_solution(six_shapes_problem, solver=adapter, max_solutions=1)
    assert solution.solutions_count == 1
    assert adapter.calls == 1


def test_compiled_model_is_not_mutated_by_enumeration(six_shapes_problem):
    engine = RelationEngine(six_shapes_problem)
    rows_before = engine.lpmodel.n_rows
    engine.run(max_solutions=3)
    assert engine.lpmodel.n_rows == rows_before


def test_invalid_arguments(scenario_problem):
    with pytest.raises(ValueError):
        RelationEngine(scenario_problem, exclusion='partial')
    with pytest.raises(ValueError):
        next(RelationEngine(scenario_problem).iter_solutions(max_solutions=0))


def test_rank_bounds_of_scenario(scenario_problem):
    solution = calc_solution(scenario_problem)
    bounds = solution.rank_bounds
    assert bounds.shape == (4, 2)
    assert np.all(bounds[:, 0] <= bounds[:, 1])
    # a single function: 1 is strictly better than 2
    assert bounds[1, 0] < bounds[2, 0]
