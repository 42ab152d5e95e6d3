"""
Adapters around the external LP/MIP oracle.

The oracle contract is ``solve(objective, matrix, directions, rhs, kinds,
maximize) -> SolverResult(status, solution)`` with non-strict directions only.
Status 0 means an optimal solution was found; any other value means the
program is infeasible or the oracle failed.
"""
import logging
from collections import namedtuple

import cvxpy as cp
import numpy as np
from scipy.optimize import Bounds, LinearConstraint, milp
from scipy.sparse import csr_matrix

from common import config
from inference.layout import BINARY

logger = logging.getLogger(__name__)

SolverResult = namedtuple('SolverResult', ['status', 'solution', 'message'])

STATUS_OPTIMAL = 0
STATUS_LIMIT = 1
STATUS_INFEASIBLE = 2
STATUS_UNBOUNDED = 3
STATUS_ERROR = 4


def normalize_strict_rows(directions, rhs, eps):
    """
    '>' becomes '>=' with rhs + eps and '<' becomes '<=' with rhs - eps.
    Returns new (directions, rhs); the inputs are left untouched.
    """
    new_dir = list(directions)
    new_rhs = np.array(rhs, dtype=float)
    for i, d in enumerate(new_dir):
        if d == '>':
            new_dir[i] = '>='
            new_rhs[i] += eps
        elif d == '<':
            new_dir[i] = '<='
            new_rhs[i] -= eps
    return new_dir, new_rhs


def _row_bounds(directions, rhs):
    lb = np.full(len(rhs), -np.inf)
    ub = np.full(len(rhs), np.inf)
    for i, d in enumerate(directions):
        if d == '<=':
            ub[i] = rhs[i]
        elif d == '>=':
            lb[i] = rhs[i]
        elif d == '==':
            lb[i] = ub[i] = rhs[i]
        else:
            raise ValueError(f"Oracle accepts '<=', '>=' and '==' only, got {d!r} in row {i}")
    return lb, ub


def solve_highs(objective, matrix, directions, rhs, kinds, maximize=False, time_limit=None):
    """Oracle backed by scipy.optimize.milp (HiGHS branch-and-cut)."""
    c = np.asarray(objective, dtype=float)
    if maximize:
        c = -c
    is_binary = np.array([k == BINARY for k in kinds], dtype=bool)
    integrality = is_binary.astype(int)
    bounds = Bounds(lb=np.zeros(len(c)), ub=np.where(is_binary, 1.0, np.inf))

    constraints = []
    if len(rhs) > 0:
        lb, ub = _row_bounds(directions, rhs)
        constraints.append(LinearConstraint(csr_matrix(np.asarray(matrix, dtype=float)), lb, ub))

    options = None if time_limit is None else {"time_limit": float(time_limit)}
    res = milp(c, integrality=integrality, bounds=bounds, constraints=constraints, options=options)

    if res.status == 0 and res.x is not None:
        return SolverResult(STATUS_OPTIMAL, np.asarray(res.x), res.message)
    return SolverResult(int(res.status) or STATUS_ERROR, None, res.message)


def solve_cvxpy(objective, matrix, directions, rhs, kinds, maximize=False, solver=None):
    """Oracle backed by cvxpy with any installed mixed-integer solver."""
    c = np.asarray(objective, dtype=float)
    A = np.asarray(matrix, dtype=float)
    is_binary = np.array([k == BINARY for k in kinds], dtype=bool)
    cont_idx = np.where(~is_binary)[0]
    bin_idx = np.where(is_binary)[0]

    xc = cp.Variable(len(cont_idx), nonneg=True) if len(cont_idx) else None
    xb = cp.Variable(len(bin_idx), boolean=True) if len(bin_idx) else None

    def linear(coefs):
        expr = 0
        if xc is not None:
            expr = expr + coefs[..., cont_idx] @ xc
        if xb is not None:
            expr = expr + coefs[..., bin_idx] @ xb
        return expr

    rhs = np.asarray(rhs, dtype=float)
    directions = np.asarray(directions, dtype=object)
    if set(directions.tolist()) - {'<=', '>=', '=='}:
        raise ValueError("Oracle accepts '<=', '>=' and '==' only")

    constraints = []
    for d in ('<=', '>=', '=='):
        rows = np.where(directions == d)[0]
        if len(rows) == 0:
            continue
        lhs = linear(A[rows])
        if d == '<=':
            constraints.append(lhs <= rhs[rows])
        elif d == '>=':
            constraints.append(lhs >= rhs[rows])
        else:
            constraints.append(lhs == rhs[rows])

    objective_expr = linear(c)
    goal = cp.Maximize(objective_expr) if maximize else cp.Minimize(objective_expr)
    prob = cp.Problem(goal, constraints)

    if solver is None:
        installed = cp.installed_solvers()
        solver = next((s for s in config.CVXPY_MIP_SOLVERS if s in installed), None)
    try:
        prob.solve(solver=solver)
    except cp.error.SolverError as e:
        logger.warning("cvxpy solver %s failed: %s", solver, e)
        return SolverResult(STATUS_ERROR, None, str(e))

    if prob.status in (cp.INFEASIBLE, cp.INFEASIBLE_INACCURATE):
        return SolverResult(STATUS_INFEASIBLE, None, prob.status)
    if prob.status in (cp.UNBOUNDED, cp.UNBOUNDED_INACCURATE):
        return SolverResult(STATUS_UNBOUNDED, None, prob.status)
    if prob.status != cp.OPTIMAL:
        return SolverResult(STATUS_ERROR, None, prob.status)

    x = np.zeros(len(c))
    if xc is not None:
        x[cont_idx] = xc.value
    if xb is not None:
        x[bin_idx] = np.round(xb.value)
    return SolverResult(STATUS_OPTIMAL, x, prob.status)


class SolverAdapter:
    """
    Packages a compiled model for the configured oracle.

    Args:
        backend (str): 'highs' (scipy.optimize.milp) or 'cvxpy'.
        time_limit (float, optional): Seconds per call, HiGHS back-end only.
        cvxpy_solver (str, optional): cvxpy solver name; first installed MIP solver if None.
    """
    BACKENDS = ('highs', 'cvxpy')

    def __init__(self, backend=config.DEFAULT_BACKEND, time_limit=None, cvxpy_solver=None):
        if backend not in self.BACKENDS:
            raise ValueError(f"Unknown solver backend: {backend!r}; expected one of {self.BACKENDS}")
        self.backend = backend
        self.time_limit = time_limit
        self.cvxpy_solver = cvxpy_solver
        self.calls = 0

    def oracle(self, objective, matrix, directions, rhs, kinds, maximize=False):
        if self.backend == 'highs':
            return solve_highs(objective, matrix, directions, rhs, kinds, maximize, time_limit=self.time_limit)
        return solve_cvxpy(objective, matrix, directions, rhs, kinds, maximize, solver=self.cvxpy_solver)

    def solve(self, lpmodel, eps):
        """Rewrites strict rows with ``eps`` and calls the oracle once."""
        directions, rhs = normalize_strict_rows(lpmodel.dir, lpmodel.rhs, eps)
        self.calls += 1
        result = self.oracle(lpmodel.obj, lpmodel.matrix, directions, rhs, lpmodel.types, lpmodel.maximize)
        logger.debug("Oracle call %d (%s): %d rows x %d vars -> status %d",
                     self.calls, self.backend, lpmodel.n_rows, lpmodel.n_vars, result.status)
        return result
