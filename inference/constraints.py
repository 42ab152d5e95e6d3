"""
Compilation of a :class:`~mcda.problem.Problem` into an :class:`LpModel`.

Notation used in the comments below, for criterion k with L characteristic
points p = 0..L-1:

    u(p)     marginal value at point p                (CHARACT_POINTS)
    best     value of the best point of criterion k   (BEST_EVALUATIONS)
    d(p)     1 if segment [p, p+1] is non-decreasing  (MON_DIRECTION_BINARY)

Conditional rows follow one pattern: ``b == active => lhs (dir) rhs``, the row
being relaxed by M whenever the binary b takes the other value.
"""
import logging

from inference import layout as lay
from inference.lpmodel import LpModel
from mcda.problem import CriterionShape

logger = logging.getLogger(__name__)


def build_lp_model(problem):
    """Compiles the full program: judgments, criterion families, normalization and eps."""
    layout = lay.VariableLayout.for_problem(problem)
    lpmodel = LpModel(layout)

    add_preference_constraints(problem, lpmodel)

    norm_row = lpmodel.new_row()
    for crit_idx in range(problem.criteria_number):
        norm_row[layout.criterion_index(lay.BEST_EVALUATIONS, crit_idx)] = 1.0
        shape = problem.shapes[crit_idx]
        SHAPE_FAMILIES[shape](problem, lpmodel, crit_idx)
    lpmodel.add_constraint(norm_row, '==', 1.0)

    eps_row = lpmodel.new_row()
    eps_row[layout.eps_index()] = 1.0
    lpmodel.add_constraint(eps_row, '==', problem.eps)

    lpmodel.pin_unreferenced()

    logger.debug("Compiled %r from shapes %s", lpmodel, [str(s) for s in problem.shapes])
    return lpmodel

# ----------------------------------------------------------------------
# Holistic judgments
# ----------------------------------------------------------------------

def alternative_value_terms(problem, layout, alt_idx, sign=1.0):
    """(column, coefficient) terms of value(alt) = sum over k of u_k(rank of alt on k)."""
    ranks = problem.alternatives_indexes[alt_idx]
    return [(layout.point_index(lay.CHARACT_POINTS, crit_idx, int(ranks[crit_idx])), sign)
            for crit_idx in range(problem.criteria_number)]


def add_holistic_judgments(problem, lpmodel, pairs, direction):
    for a, b in pairs:
        terms = alternative_value_terms(problem, lpmodel.layout, a) + \
                alternative_value_terms(problem, lpmodel.layout, b, sign=-1.0)
        lpmodel.add_terms(terms, direction, 0.0)


def add_preference_constraints(problem, lpmodel):
    """Strict: value(a) > value(b); weak: value(a) >= value(b); indifference: value(a) == value(b)."""
    add_holistic_judgments(problem, lpmodel, problem.strict_preferences, '>')
    add_holistic_judgments(problem, lpmodel, problem.weak_preferences, '>=')
    add_holistic_judgments(problem, lpmodel, problem.indifferences, '==')

# ----------------------------------------------------------------------
# Building blocks
# ----------------------------------------------------------------------

def add_conditional(problem, lpmodel, terms, direction, rhs, binary_col, active=1):
    """
    Adds ``binary == active => sum(terms) (direction) rhs`` as one big-M row.

    direction is '>=' or '<='; '==' is expressed by calling this twice.
    """
    M = problem.M
    terms = list(terms)
    if direction == '>=':
        # terms >= rhs - M*(1-b)   or   terms >= rhs - M*b
        if active == 1:
            lpmodel.add_terms(terms + [(binary_col, -M)], '>=', rhs - M)
        else:
            lpmodel.add_terms(terms + [(binary_col, M)], '>=', rhs)
    elif direction == '<=':
        # terms <= rhs + M*(1-b)   or   terms <= rhs + M*b
        if active == 1:
            lpmodel.add_terms(terms + [(binary_col, M)], '<=', rhs + M)
        else:
            lpmodel.add_terms(terms + [(binary_col, -M)], '<=', rhs)
    else:
        raise ValueError(f"Conditional rows support '>=' and '<=' only, got {direction!r}")


def add_conditional_equality(problem, lpmodel, terms, rhs, binary_col, active=1):
    terms = list(terms)
    add_conditional(problem, lpmodel, terms, '>=', rhs, binary_col, active)
    add_conditional(problem, lpmodel, terms, '<=', rhs, binary_col, active)


def add_monotone_chain(lpmodel, cols, increasing):
    """x(p+1) >= x(p) (increasing) or x(p+1) <= x(p) for consecutive columns."""
    direction = '>=' if increasing else '<='
    for p in range(len(cols) - 1):
        lpmodel.add_terms([(cols[p + 1], 1.0), (cols[p], -1.0)], direction, 0.0)


def add_segment_directions(problem, lpmodel, crit_idx):
    """u(p+1) >= u(p) when d(p) == 1 and u(p+1) <= u(p) when d(p) == 0."""
    layout = lpmodel.layout
    u = layout.point_indexes(lay.CHARACT_POINTS, crit_idx)
    d = layout.point_indexes(lay.MON_DIRECTION_BINARY, crit_idx)
    for p in range(len(u) - 1):
        step = [(u[p + 1], 1.0), (u[p], -1.0)]
        add_conditional(problem, lpmodel, step, '>=', 0.0, d[p], active=1)
        add_conditional(problem, lpmodel, step, '<=', 0.0, d[p], active=0)


def add_bounded_by_best(lpmodel, crit_idx):
    """u(p) <= best for every point."""
    layout = lpmodel.layout
    best = layout.criterion_index(lay.BEST_EVALUATIONS, crit_idx)
    for col in layout.point_indexes(lay.CHARACT_POINTS, crit_idx):
        lpmodel.add_terms([(col, 1.0), (best, -1.0)], '<=', 0.0)


def add_exactly_one(lpmodel, cols):
    lpmodel.add_terms(((c, 1.0) for c in cols), '==', 1.0)


def distance_to_nearest_end(p, levels):
    return min(p, levels - 1 - p)

# ----------------------------------------------------------------------
# GAIN / COST
# ----------------------------------------------------------------------

def add_predefined_mon_constraints(problem, lpmodel, crit_idx, gain):
    u = lpmodel.layout.point_indexes(lay.CHARACT_POINTS, crit_idx)
    add_monotone_chain(lpmodel, u, increasing=gain)


def add_predefined_mon_normalization(problem, lpmodel, crit_idx, gain):
    """Worst point pinned to 0, best point equal to the criterion's best evaluation."""
    layout = lpmodel.layout
    u = layout.point_indexes(lay.CHARACT_POINTS, crit_idx)
    best = layout.criterion_index(lay.BEST_EVALUATIONS, crit_idx)
    worst_col, best_col = (u[0], u[-1]) if gain else (u[-1], u[0])
    lpmodel.add_terms([(worst_col, 1.0)], '==', 0.0)
    lpmodel.add_terms([(best_col, 1.0), (best, -1.0)], '==', 0.0)


def add_gain_family(problem, lpmodel, crit_idx):
    add_predefined_mon_constraints(problem, lpmodel, crit_idx, gain=True)
    add_predefined_mon_normalization(problem, lpmodel, crit_idx, gain=True)


def add_cost_family(problem, lpmodel, crit_idx):
    add_predefined_mon_constraints(problem, lpmodel, crit_idx, gain=False)
    add_predefined_mon_normalization(problem, lpmodel, crit_idx, gain=False)

# ----------------------------------------------------------------------
# NOT_PREDEFINED: monotone, direction unknown
# ----------------------------------------------------------------------

def add_not_predefined_mon_constraints(problem, lpmodel, crit_idx):
    """
    Gain-case shadow g and cost-case shadow c are both monotone; u follows g
    when the cost binary z is 0 and c when it is 1.
    """
    layout = lpmodel.layout
    u = layout.point_indexes(lay.CHARACT_POINTS, crit_idx)
    g = layout.point_indexes(lay.NOT_PREDEFINED_GAIN_POINTS, crit_idx)
    c = layout.point_indexes(lay.NOT_PREDEFINED_COST_POINTS, crit_idx)
    z = layout.criterion_index(lay.NOT_PREDEFINED_COST_BINARY, crit_idx)

    add_monotone_chain(lpmodel, g, increasing=True)
    add_monotone_chain(lpmodel, c, increasing=False)

    for p in range(len(u)):
        add_conditional_equality(problem, lpmodel, [(u[p], 1.0), (g[p], -1.0)], 0.0, z, active=0)
        add_conditional_equality(problem, lpmodel, [(u[p], 1.0), (c[p], -1.0)], 0.0, z, active=1)


def add_not_predefined_mon_normalization(problem, lpmodel, crit_idx):
    layout = lpmodel.layout
    g = layout.point_indexes(lay.NOT_PREDEFINED_GAIN_POINTS, crit_idx)
    c = layout.point_indexes(lay.NOT_PREDEFINED_COST_POINTS, crit_idx)
    z = layout.criterion_index(lay.NOT_PREDEFINED_COST_BINARY, crit_idx)
    best = layout.criterion_index(lay.BEST_EVALUATIONS, crit_idx)

    lpmodel.add_terms([(g[0], 1.0)], '==', 0.0)
    lpmodel.add_terms([(c[-1], 1.0)], '==', 0.0)
    add_conditional_equality(problem, lpmodel, [(best, 1.0), (g[-1], -1.0)], 0.0, z, active=0)
    add_conditional_equality(problem, lpmodel, [(best, 1.0), (c[0], -1.0)], 0.0, z, active=1)


def add_obj_for_not_predefined(problem, lpmodel, crit_idx):
    # Settles on GAIN whenever both directions are compatible
    z = lpmodel.layout.criterion_index(lay.NOT_PREDEFINED_COST_BINARY, crit_idx)
    lpmodel.add_objective_term(z, 1.0)


def add_not_predefined_family(problem, lpmodel, crit_idx):
    add_not_predefined_mon_constraints(problem, lpmodel, crit_idx)
    add_not_predefined_mon_normalization(problem, lpmodel, crit_idx)
    add_obj_for_not_predefined(problem, lpmodel, crit_idx)

# ----------------------------------------------------------------------
# A_TYPE / V_TYPE: single interior best (A) or worst (V) point
# ----------------------------------------------------------------------

def add_a_and_v_type_mon_constraints(problem, lpmodel, crit_idx, a_type):
    """
    One indicator per point marks the peak (A) or trough (V). The direction of
    segment [p, p+1] is derived from it:

        A: d(p) = sum of indicators at q > p   (rising before the peak)
        V: d(p) = sum of indicators at q <= p  (rising after the trough)
    """
    layout = lpmodel.layout
    u = layout.point_indexes(lay.CHARACT_POINTS, crit_idx)
    ind = layout.point_indexes(lay.A_AND_V_TYPE_BINARY, crit_idx)
    d = layout.point_indexes(lay.MON_DIRECTION_BINARY, crit_idx)
    best = layout.criterion_index(lay.BEST_EVALUATIONS, crit_idx)

    add_exactly_one(lpmodel, ind)

    for p in range(len(u) - 1):
        selected = ind[p + 1:] if a_type else ind[:p + 1]
        lpmodel.add_terms([(d[p], 1.0)] + [(q, -1.0) for q in selected], '==', 0.0)
    add_segment_directions(problem, lpmodel, crit_idx)

    add_bounded_by_best(lpmodel, crit_idx)
    for p in range(len(u)):
        if a_type:
            add_conditional(problem, lpmodel, [(u[p], 1.0), (best, -1.0)], '>=', 0.0, ind[p], active=1)
        else:
            add_conditional(problem, lpmodel, [(u[p], 1.0)], '<=', 0.0, ind[p], active=1)


def add_a_type_mon_normalization(problem, lpmodel, crit_idx):
    """The worst point of an A-shaped function is one of the two ends; y picks which is 0."""
    layout = lpmodel.layout
    u = layout.point_indexes(lay.CHARACT_POINTS, crit_idx)
    y = layout.criterion_index(lay.A_TYPE_ZERO_NORM_BINARY, crit_idx)
    add_conditional(problem, lpmodel, [(u[0], 1.0)], '<=', 0.0, y, active=1)
    add_conditional(problem, lpmodel, [(u[-1], 1.0)], '<=', 0.0, y, active=0)


def add_v_type_mon_normalization(problem, lpmodel, crit_idx):
    """The best point of a V-shaped function is one of the two ends; v picks which equals best."""
    layout = lpmodel.layout
    u = layout.point_indexes(lay.CHARACT_POINTS, crit_idx)
    v = layout.criterion_index(lay.V_TYPE_ONE_NORM_BINARY, crit_idx)
    best = layout.criterion_index(lay.BEST_EVALUATIONS, crit_idx)
    add_conditional(problem, lpmodel, [(u[0], 1.0), (best, -1.0)], '>=', 0.0, v, active=1)
    add_conditional(problem, lpmodel, [(u[-1], 1.0), (best, -1.0)], '>=', 0.0, v, active=0)


def add_obj_for_a_and_v_type(problem, lpmodel, crit_idx):
    # Interior extrema cost their distance to the nearest end of the scale
    ind = lpmodel.layout.point_indexes(lay.A_AND_V_TYPE_BINARY, crit_idx)
    for p, col in enumerate(ind):
        lpmodel.add_objective_term(col, float(distance_to_nearest_end(p, len(ind))))


def add_a_type_family(problem, lpmodel, crit_idx):
    add_a_and_v_type_mon_constraints(problem, lpmodel, crit_idx, a_type=True)
    add_a_type_mon_normalization(problem, lpmodel, crit_idx)
    add_obj_for_a_and_v_type(problem, lpmodel, crit_idx)


def add_v_type_family(problem, lpmodel, crit_idx):
    add_a_and_v_type_mon_constraints(problem, lpmodel, crit_idx, a_type=False)
    add_v_type_mon_normalization(problem, lpmodel, crit_idx)
    add_obj_for_a_and_v_type(problem, lpmodel, crit_idx)

# ----------------------------------------------------------------------
# NON_MON: no assumption on monotonicity
# ----------------------------------------------------------------------

def add_non_mon_constraints(problem, lpmodel, crit_idx):
    """
    Free segment directions; the change indicator of point p+1 is
    d(p) XOR d(p+1), written as four rows.
    """
    layout = lpmodel.layout
    d = layout.point_indexes(lay.MON_DIRECTION_BINARY, crit_idx)
    ch = layout.point_indexes(lay.CHANGE_MON_BINARY, crit_idx)

    add_segment_directions(problem, lpmodel, crit_idx)

    for p in range(len(d) - 2):
        lpmodel.add_terms([(ch[p], 1.0), (d[p], -1.0), (d[p + 1], -1.0)], '<=', 0.0)
        lpmodel.add_terms([(ch[p], 1.0), (d[p], 1.0), (d[p + 1], 1.0)], '<=', 2.0)
        lpmodel.add_terms([(ch[p], 1.0), (d[p], -1.0), (d[p + 1], 1.0)], '>=', 0.0)
        lpmodel.add_terms([(ch[p], 1.0), (d[p], 1.0), (d[p + 1], -1.0)], '>=', 0.0)


def add_non_mon_normalization(problem, lpmodel, crit_idx):
    """Exactly one point is pinned to 0 and exactly one to the best evaluation."""
    layout = lpmodel.layout
    u = layout.point_indexes(lay.CHARACT_POINTS, crit_idx)
    zero = layout.point_indexes(lay.NON_MON_ZERO_NORM_BINARY, crit_idx)
    one = layout.point_indexes(lay.NON_MON_ONE_NORM_BINARY, crit_idx)
    best = layout.criterion_index(lay.BEST_EVALUATIONS, crit_idx)

    add_exactly_one(lpmodel, zero)
    add_exactly_one(lpmodel, one)
    add_bounded_by_best(lpmodel, crit_idx)
    for p in range(len(u)):
        add_conditional(problem, lpmodel, [(u[p], 1.0)], '<=', 0.0, zero[p], active=1)
        add_conditional(problem, lpmodel, [(u[p], 1.0), (best, -1.0)], '>=', 0.0, one[p], active=1)


def add_obj_for_non_mon(problem, lpmodel, crit_idx):
    # Each change of monotonicity costs 1
    ch = lpmodel.layout.point_indexes(lay.CHANGE_MON_BINARY, crit_idx)
    for col in ch[:max(len(ch) - 2, 0)]:
        lpmodel.add_objective_term(col, 1.0)


def add_non_mon_family(problem, lpmodel, crit_idx):
    add_non_mon_constraints(problem, lpmodel, crit_idx)
    add_non_mon_normalization(problem, lpmodel, crit_idx)
    add_obj_for_non_mon(problem, lpmodel, crit_idx)


SHAPE_FAMILIES = {
    CriterionShape.GAIN: add_gain_family,
    CriterionShape.COST: add_cost_family,
    CriterionShape.NOT_PREDEFINED: add_not_predefined_family,
    CriterionShape.A_TYPE: add_a_type_family,
    CriterionShape.V_TYPE: add_v_type_family,
    CriterionShape.NON_MON: add_non_mon_family,
}
