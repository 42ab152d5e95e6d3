"""
Decision problem definition: alternatives table, criterion shapes and the
decision maker's pairwise judgments.

A problem is validated once in :func:`build_problem` and never changes
afterwards; every model compiled from it reads the same level index.
"""
import logging
from dataclasses import dataclass
from enum import Enum

import numpy as np

from common.errors import ShapeError, ParameterError, PreferenceInconsistencyError
from mcda.models import LevelIndex

logger = logging.getLogger(__name__)


class CriterionShape(str, Enum):
    """Prior knowledge about the monotonicity of a marginal value function."""
    GAIN = 'GAIN'
    COST = 'COST'
    NOT_PREDEFINED = 'NOT_PREDEFINED'
    A_TYPE = 'A_TYPE'
    V_TYPE = 'V_TYPE'
    NON_MON = 'NON_MON'

    def __str__(self):
        return self.value


@dataclass(frozen=True, eq=False)
class Problem:
    alternatives: np.ndarray
    shapes: tuple
    M: float
    eps: float
    strict_preferences: tuple
    weak_preferences: tuple
    indifferences: tuple
    levels: LevelIndex
    alternatives_indexes: np.ndarray

    @property
    def alternatives_number(self):
        return self.alternatives.shape[0]

    @property
    def criteria_number(self):
        return self.alternatives.shape[1]

    @property
    def level_numbers(self):
        return self.levels.level_numbers


def build_problem(alternatives, shapes, M, eps, strict_preferences=None, weak_preferences=None, indifferences=None):
    """
    Validates the inputs and builds an immutable :class:`Problem`.

    Args:
        alternatives (array-like): (N_alternatives, N_criteria) evaluations, N_alternatives >= 3.
        shapes (sequence): One CriterionShape (or its name) per criterion column.
        M (float): Big-M constant, M > 0.
        eps (float): Strictness margin, 0 < eps < 1.
        strict_preferences, weak_preferences, indifferences: Sequences of (a, b)
            zero-based alternative index pairs, or None.

    Raises:
        ShapeError, ParameterError, PreferenceInconsistencyError
    """
    table = validate_alternatives(alternatives)
    n_alternatives, n_criteria = table.shape

    shapes = validate_shapes(shapes, n_criteria)
    M = validate_M(M)
    eps = validate_eps(eps)
    strict, weak, indiff = validate_preferences(strict_preferences, weak_preferences, indifferences, n_alternatives)

    table.setflags(write=False)
    levels = LevelIndex.from_alternatives(table)
    ranks = levels.ranks(table)
    ranks.setflags(write=False)

    logger.debug("Built problem: %d alternatives, %d criteria, levels %s, %d/%d/%d judgments",
                 n_alternatives, n_criteria, levels.level_numbers.tolist(), len(strict), len(weak), len(indiff))

    return Problem(
        alternatives=table,
        shapes=shapes,
        M=M,
        eps=eps,
        strict_preferences=strict,
        weak_preferences=weak,
        indifferences=indiff,
        levels=levels,
        alternatives_indexes=ranks,
    )

# ----------------------------------------------------------------------
# Validation
# ----------------------------------------------------------------------

def validate_alternatives(alternatives):
    if alternatives is None:
        raise ShapeError("Argument 'alternatives' must be a non-null matrix of alternatives (rows) and criteria (columns)")
    try:
        table = np.array(alternatives, dtype=float)
    except (TypeError, ValueError) as e:
        raise ShapeError(f"Argument 'alternatives' must be a numeric matrix: {e}") from e

    if table.ndim != 2:
        raise ShapeError("Argument 'alternatives' must be a two-dimensional matrix")
    if table.shape[0] < 3:
        raise ShapeError("Alternatives number must be greater or equal 3")
    if table.shape[1] < 1:
        raise ShapeError("Criteria number must be greater or equal 1")

    bad_columns = np.where(~np.all(np.isfinite(table), axis=0))[0]
    if len(bad_columns) > 0:
        raise ShapeError(f"Criterion {bad_columns[0]} contains non-finite values", criterion=int(bad_columns[0]))
    return table


def validate_shapes(shapes, criteria_number):
    if shapes is None or isinstance(shapes, str):
        raise ShapeError("Argument 'shapes' must be a non-null sequence of criterion shapes")
    shapes = list(shapes)
    if len(shapes) != criteria_number:
        raise ShapeError(f"Argument 'shapes' has {len(shapes)} entries but there are {criteria_number} criteria")

    result = []
    for crit_idx, shape in enumerate(shapes):
        try:
            result.append(CriterionShape(shape))
        except ValueError:
            allowed = ", ".join(s.value for s in CriterionShape)
            raise ShapeError(f"Unknown shape {shape!r} for criterion {crit_idx}; expected one of {allowed}",
                             criterion=crit_idx) from None
    return tuple(result)


def validate_M(M):
    if M is None or not np.isfinite(M) or not M > 0:
        raise ParameterError("Argument 'M' must be greater than 0", name='M', value=M)
    return float(M)


def validate_eps(eps):
    if eps is None or not 0 < eps < 1:
        raise ParameterError("Argument 'eps' must be greater than 0 and less than 1", name='eps', value=eps)
    return float(eps)


def _as_pairs(pairs, name, alternatives_number):
    """Converts a pair table to a list of int tuples, checking shape and range."""
    if pairs is None:
        return []
    try:
        arr = np.asarray(pairs, dtype=float)
    except (TypeError, ValueError) as e:
        raise ShapeError(f"Argument '{name}' must be a numeric two-column matrix: {e}") from e
    if arr.size == 0:
        return []
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ShapeError(f"Argument '{name}' must be None or a two-column matrix")
    if not np.all(np.equal(np.mod(arr, 1), 0)):
        raise ShapeError(f"Argument '{name}' must contain integer alternative indexes")

    result = []
    for a, b in arr.astype(int):
        pair = (int(a), int(b))
        if a == b or not (0 <= a < alternatives_number) or not (0 <= b < alternatives_number):
            raise PreferenceInconsistencyError(
                f"Argument '{name}' must consist of pairs of indexes of two different alternatives, got {pair}",
                pair=pair)
        result.append(pair)
    return result


def validate_preferences(strict_preferences, weak_preferences, indifferences, alternatives_number):
    """
    Deduplicates the three judgment sets and checks they do not contradict each other.
    Returns (strict, weak, indifferences) as tuples of pairs in first-occurrence order.
    """
    strict = _as_pairs(strict_preferences, 'strict_preferences', alternatives_number)
    weak = _as_pairs(weak_preferences, 'weak_preferences', alternatives_number)
    indiff = _as_pairs(indifferences, 'indifferences', alternatives_number)

    if not strict and not weak and not indiff:
        raise PreferenceInconsistencyError("No preferences of the decision maker were specified")

    indiff_pairs, indiff_kept = set(), []
    for a, b in indiff:
        if (a, b) in indiff_pairs or (b, a) in indiff_pairs:
            continue
        indiff_pairs.add((a, b))
        indiff_kept.append((a, b))

    weak_pairs, weak_kept = set(), []
    for a, b in weak:
        if (a, b) in weak_pairs:
            continue
        if (a, b) in indiff_pairs or (b, a) in indiff_pairs:
            raise PreferenceInconsistencyError(
                f"Inconsistency of preference information: 'indifferences' and 'weak_preferences' contain ({a}, {b})",
                pair=(a, b))
        weak_pairs.add((a, b))
        weak_kept.append((a, b))

    strict_pairs, strict_kept = set(), []
    for a, b in strict:
        if (a, b) in strict_pairs:
            continue
        if (b, a) in strict_pairs:
            raise PreferenceInconsistencyError(
                f"Inconsistency of preference information: 'strict_preferences' contains ({a}, {b}) and ({b}, {a})",
                pair=(a, b))
        if (a, b) in indiff_pairs or (b, a) in indiff_pairs or (a, b) in weak_pairs or (b, a) in weak_pairs:
            raise PreferenceInconsistencyError(
                f"Inconsistency of preference information: 'indifferences' or 'weak_preferences' "
                f"contain ({a}, {b}) pair of 'strict_preferences'",
                pair=(a, b))
        strict_pairs.add((a, b))
        strict_kept.append((a, b))

    return tuple(strict_kept), tuple(weak_kept), tuple(indiff_kept)
