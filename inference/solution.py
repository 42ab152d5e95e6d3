import numpy as np

from common import config
from inference import layout as lay
from mcda.problem import CriterionShape


class Solution:
    """
    Result of one or more solves of a compiled problem.

    Attributes:
        solutions (np.ndarray): (N_solutions, N_variables) raw solution vectors.
        final_criteria_types (np.ndarray): (N_solutions, N_criteria) shape labels after resolution.
        additive_value_functions (np.ndarray): (N_solutions, N_alternatives) overall values.
        marginal_values (list): Per solution, per criterion, marginal value at each characteristic point.
        extreme_points (np.ndarray): (N_solutions, N_criteria) peak (A_TYPE) or trough (V_TYPE)
            point index, -1 for other shapes.
        possible_relations, necessary_relations (set of (i, j)): Outranking relations.
        outranking_frequency (np.ndarray): (N_alternatives, N_alternatives) share of
            compatible functions with value(i) >= value(j).
        rank_bounds (np.ndarray): (N_alternatives, 2) best and worst rank (0 = best).
    """
    def __init__(self, solutions=None, final_criteria_types=None, additive_value_functions=None,
                 marginal_values=None, extreme_points=None, relations=None):
        self.solutions = solutions
        self.final_criteria_types = final_criteria_types
        self.additive_value_functions = additive_value_functions
        self.marginal_values = marginal_values if marginal_values is not None else []
        self.extreme_points = extreme_points

        self.set_relations(relations)

    def set_relations(self, relations):
        relations = relations or {}
        self.possible_relations = relations.get('possible', set())
        self.necessary_relations = relations.get('necessary', set())
        self.outranking_frequency = relations.get('frequency')
        self.rank_bounds = relations.get('rank_bounds')

    @property
    def solutions_count(self):
        return 0 if self.solutions is None else len(self.solutions)

    def __bool__(self):
        return self.solutions_count > 0

    def __repr__(self):
        return (f"Solution(solutions={self.solutions_count}, possible={len(self.possible_relations)}, "
                f"necessary={len(self.necessary_relations)})")

# ----------------------------------------------------------------------
# Reading one solution vector through the layout
# ----------------------------------------------------------------------

def get_marginal_values(problem, layout, solution):
    """Marginal value at every characteristic point, one array per criterion."""
    solution = np.asarray(solution, dtype=float)
    return [solution[layout.point_indexes(lay.CHARACT_POINTS, k)] for k in range(problem.criteria_number)]


def get_not_predefined_cost_binary(layout, solution, crit_idx):
    value = solution[layout.criterion_index(lay.NOT_PREDEFINED_COST_BINARY, crit_idx)]
    return int(value > config.BINARY_THRESHOLD)


def get_final_criteria_types(problem, layout, solution):
    """
    GAIN/COST as declared, NOT_PREDEFINED resolved from its cost binary
    (1 => COST, 0 => GAIN); the remaining shapes keep their declared tag.
    """
    result = []
    for crit_idx, shape in enumerate(problem.shapes):
        if shape == CriterionShape.NOT_PREDEFINED:
            is_cost = get_not_predefined_cost_binary(layout, solution, crit_idx)
            result.append(CriterionShape.COST.value if is_cost else CriterionShape.GAIN.value)
        else:
            result.append(shape.value)
    return result


def get_extreme_points(problem, layout, solution):
    """Index of the selected peak (A_TYPE) or trough (V_TYPE) per criterion; -1 otherwise."""
    result = np.full(problem.criteria_number, -1, dtype=int)
    for crit_idx, shape in enumerate(problem.shapes):
        if shape in (CriterionShape.A_TYPE, CriterionShape.V_TYPE):
            ind = solution[layout.point_indexes(lay.A_AND_V_TYPE_BINARY, crit_idx)]
            result[crit_idx] = int(np.argmax(ind))
    return result


def calc_additive_values(problem, marginal_values):
    """value(x) = sum over criteria of the marginal value at x's rank."""
    ranks = problem.alternatives_indexes
    values = np.zeros(problem.alternatives_number)
    for crit_idx in range(problem.criteria_number):
        values += marginal_values[crit_idx][ranks[:, crit_idx]]
    return values


def interpret_solutions(problem, layout, solutions_mat):
    """Builds a :class:`Solution` from the accepted solution vectors (rows of solutions_mat)."""
    solutions_mat = np.atleast_2d(np.asarray(solutions_mat, dtype=float))
    marginal_values, types, values, extremes = [], [], [], []
    for solution in solutions_mat:
        marg = get_marginal_values(problem, layout, solution)
        marginal_values.append(marg)
        types.append(get_final_criteria_types(problem, layout, solution))
        values.append(calc_additive_values(problem, marg))
        extremes.append(get_extreme_points(problem, layout, solution))

    return Solution(
        solutions=solutions_mat,
        final_criteria_types=np.array(types, dtype=object),
        additive_value_functions=np.array(values),
        marginal_values=marginal_values,
        extreme_points=np.array(extremes, dtype=int),
    )
