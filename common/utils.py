import os
import json
import numpy as np
from itertools import combinations
from scipy.special import expit

from mcda.problem import build_problem

# ----------------------------------------------------------------------
# Math Utilities
# ----------------------------------------------------------------------

def robust_sigmoid(x):
    """Numerically stable sigmoid function."""
    return expit(x)

def get_combinations(arr):
    """Return all pairwise combinations from a 1D array."""
    return np.array(list(combinations(arr, 2)))

# ----------------------------------------------------------------------
# IO & Filesystem Utilities
# ----------------------------------------------------------------------

def save_path(path: str):
    """Create directory if it doesn’t exist."""
    os.makedirs(path, exist_ok=True)

def _save_pairs(path, pairs):
    pairs = np.asarray(pairs, dtype=int).reshape(-1, 2)
    np.savetxt(path, pairs, fmt='%d')

def _load_pairs(path):
    if not os.path.exists(path) or os.path.getsize(path) == 0:
        return None
    pairs = np.loadtxt(path, dtype=int, ndmin=2)
    return pairs if pairs.size > 0 else None

# ----------------------------------------------------------------------
# Problem Persistence
# ----------------------------------------------------------------------

PAIR_FILES = {
    'strict_preferences': 'strict.csv',
    'weak_preferences': 'weak.csv',
    'indifferences': 'indifferent.csv',
}

def save_problem(problem_dir: str, alternatives, shapes, M, eps,
                 strict_preferences=None, weak_preferences=None, indifferences=None, true_utility=None):
    """
    Writes one problem as plain-text files:
        table.csv            evaluations (alternatives x criteria)
        strict/weak/indifferent.csv   two-column index pairs
        params.json          shapes, M, eps
        Us.csv               hidden utility of each alternative (synthetic data only)
    """
    save_path(problem_dir)
    np.savetxt(os.path.join(problem_dir, "table.csv"), np.asarray(alternatives, dtype=float))

    pairs = {
        'strict_preferences': strict_preferences,
        'weak_preferences': weak_preferences,
        'indifferences': indifferences,
    }
    for key, filename in PAIR_FILES.items():
        _save_pairs(os.path.join(problem_dir, filename), pairs[key] if pairs[key] is not None else [])

    params = {"shapes": [str(s) for s in shapes], "M": float(M), "eps": float(eps)}
    with open(os.path.join(problem_dir, "params.json"), "w") as f:
        json.dump(params, f, indent=4)

    if true_utility is not None:
        np.savetxt(os.path.join(problem_dir, "Us.csv"), np.asarray(true_utility, dtype=float))

def read_problem(problem_dir: str):
    """
    Reads a problem written by :func:`save_problem` and validates it.
    Returns: (Problem, true_utility or None)
    """
    table_path = os.path.join(problem_dir, "table.csv")
    params_path = os.path.join(problem_dir, "params.json")
    if not os.path.exists(table_path) or not os.path.exists(params_path):
        raise FileNotFoundError(f"Missing problem files in {problem_dir}")

    alternatives = np.loadtxt(table_path, ndmin=2)
    with open(params_path, 'r') as f:
        params = json.load(f)

    pairs = {key: _load_pairs(os.path.join(problem_dir, filename)) for key, filename in PAIR_FILES.items()}
    problem = build_problem(alternatives, params["shapes"], params["M"], params["eps"], **pairs)

    Us_path = os.path.join(problem_dir, "Us.csv")
    Us = np.loadtxt(Us_path) if os.path.exists(Us_path) else None
    return problem, Us

def dataset_dir(dataset_fold: str, f1: int, f2: int, f3: int):
    return os.path.join(dataset_fold, f"f1_{f1}__f2_{f2}__f3_{f3}")

def read_dataset(dataset_fold: str, f1: int, f2: int, f3: int):
    """
    Reads every run of one configuration (f1 alternatives, f2 criteria, f3 % of judged pairs).
    Returns: list of (run_name, Problem, true_utility)
    """
    config_dir = dataset_dir(dataset_fold, f1, f2, f3)
    if not os.path.isdir(config_dir):
        raise FileNotFoundError(f"Missing dataset for f1={f1}, f2={f2}, f3={f3}")

    runs = sorted(d for d in os.listdir(config_dir) if d.startswith("run_"))
    result = []
    for run in runs:
        problem, Us = read_problem(os.path.join(config_dir, run))
        result.append((run, problem, Us))
    return result
