import numpy as np
import pandas as pd

from common import config

# ----------------------------------------------------------------------
# Pairwise indices over a table of compatible value functions
# ----------------------------------------------------------------------

def outranking_frequency(additive_value_functions, tol=config.RELATION_TOLERANCE):
    """
    Pairwise outranking index: share of compatible functions in which value(i) >= value(j).

    Args:
        additive_value_functions (np.ndarray): (N_solutions, N_alternatives).
    Returns: np.ndarray (N_alternatives, N_alternatives); the diagonal is 1.
    """
    vals = np.atleast_2d(np.asarray(additive_value_functions, dtype=float))
    n_alt = vals.shape[1]
    count = np.zeros((n_alt, n_alt))

    for scores in vals:
        count += (scores[:, None] >= scores[None, :] - tol)

    return count / vals.shape[0]


def rank_acceptability(additive_value_functions):
    """Rank Acceptability Index: share of compatible functions placing alternative i at rank r (0 = best)."""
    vals = np.atleast_2d(np.asarray(additive_value_functions, dtype=float))
    n_alt = vals.shape[1]
    rank_count = np.zeros((n_alt, n_alt))

    for scores in vals:
        ranks = np.argsort(np.argsort(-scores, kind='stable'), kind='stable')
        rank_count[np.arange(n_alt), ranks] += 1

    return rank_count / vals.shape[0]


def rank_bounds(additive_value_functions, tol=config.RELATION_TOLERANCE):
    """
    Best and worst rank of each alternative over the compatible functions.
    An alternative's rank is the number of alternatives strictly better than it.
    Returns: np.ndarray (N_alternatives, 2) of [best, worst].
    """
    vals = np.atleast_2d(np.asarray(additive_value_functions, dtype=float))
    ranks = np.array([np.sum(scores[None, :] > scores[:, None] + tol, axis=1) for scores in vals])
    return np.column_stack([ranks.min(axis=0), ranks.max(axis=0)])

# ----------------------------------------------------------------------
# Possible / necessary relations
# ----------------------------------------------------------------------

def get_possible_and_necessary_relations(additive_value_functions, tol=config.RELATION_TOLERANCE):
    """
    For every ordered pair (i, j), i != j:
        possible  if value(i) >= value(j) in at least one compatible function,
        necessary if value(i) >= value(j) in every one of them.

    Values closer than ``tol`` compare as equal.
    Returns: dict with 'possible', 'necessary' (sets of pairs), 'frequency' and 'rank_bounds'.
    """
    vals = np.atleast_2d(np.asarray(additive_value_functions, dtype=float))
    if vals.shape[0] == 0:
        return {'possible': set(), 'necessary': set(), 'frequency': None, 'rank_bounds': None}

    freq = outranking_frequency(vals, tol)
    n_alt = vals.shape[1]
    possible, necessary = set(), set()
    for i in range(n_alt):
        for j in range(n_alt):
            if i == j:
                continue
            if freq[i, j] > 0:
                possible.add((i, j))
            if freq[i, j] == 1:
                necessary.add((i, j))

    return {
        'possible': possible,
        'necessary': necessary,
        'frequency': freq,
        'rank_bounds': rank_bounds(vals, tol),
    }


def relations_frame(relations, n_alternatives, names=None):
    """
    Boolean DataFrame view of a relation set: cell (i, j) is True when (i, j) is in the set.
    """
    labels = list(names) if names is not None else list(range(n_alternatives))
    mat = np.zeros((n_alternatives, n_alternatives), dtype=bool)
    for i, j in relations:
        mat[i, j] = True
    return pd.DataFrame(mat, index=labels, columns=labels)
