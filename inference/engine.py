import logging

import numpy as np

from common import config
from common.errors import InfeasibleModelError
from inference.constraints import build_lp_model
from inference.relations import get_possible_and_necessary_relations
from inference.solution import Solution, interpret_solutions
from inference.solver import SolverAdapter, STATUS_OPTIMAL

logger = logging.getLogger(__name__)


class RelationEngine:
    """
    Robust ordinal regression engine.
    Compiles a problem once, enumerates structurally different compatible value
    functions and derives possible / necessary outranking relations from them.
    """
    def __init__(self, problem, solver=None, exclusion=config.DEFAULT_EXCLUSION):
        """
        Args:
            problem (Problem): Validated decision problem.
            solver (SolverAdapter, optional): Oracle adapter; HiGHS by default.
            exclusion (str): Cut appended between rounds, 'ones' or 'full'.
        """
        if exclusion not in ('ones', 'full'):
            raise ValueError(f"Unknown exclusion: {exclusion!r}")
        self.problem = problem
        self.solver = solver if solver is not None else SolverAdapter()
        self.exclusion = exclusion
        self.lpmodel = build_lp_model(problem)

    @property
    def layout(self):
        return self.lpmodel.layout

    # ------------------------------------------------------------------
    # Enumeration
    # ------------------------------------------------------------------

    def iter_solutions(self, max_solutions=config.DEFAULT_MAX_SOLUTIONS):
        """
        Lazily yields solution vectors of structurally different compatible functions.

        Each round clones the previous model and appends one exclusion cut, so a
        model is never modified after it was handed to the oracle. Stops at the
        first non-optimal status or after ``max_solutions`` (None = no cap).

        Raises:
            InfeasibleModelError: if the very first solve fails.
        """
        if max_solutions is not None and max_solutions < 1:
            raise ValueError("max_solutions must be a positive integer or None")
        lpmodel = self.lpmodel
        found = 0
        while max_solutions is None or found < max_solutions:
            result = self.solver.solve(lpmodel, self.problem.eps)
            if result.status != STATUS_OPTIMAL:
                if found == 0:
                    raise InfeasibleModelError(
                        f"No compatible value function exists (oracle status {result.status}: {result.message})",
                        status=result.status)
                logger.debug("Enumeration stopped after %d solutions (status %d)", found, result.status)
                return

            found += 1
            yield result.solution

            lpmodel = lpmodel.copy()
            if lpmodel.forbid_solution(result.solution, self.exclusion, config.BINARY_THRESHOLD) is None:
                logger.debug("No structural binary set in solution %d, nothing left to exclude", found)
                return

    def run(self, max_solutions=config.DEFAULT_MAX_SOLUTIONS, tol=config.RELATION_TOLERANCE):
        """Collects the enumerated solutions and interprets them into a :class:`Solution`."""
        solutions = list(self.iter_solutions(max_solutions))
        solutions_mat = np.vstack(solutions)
        result = interpret_solutions(self.problem, self.layout, solutions_mat)
        result.set_relations(get_possible_and_necessary_relations(result.additive_value_functions, tol))

        logger.info("Found %d compatible value functions: %d possible, %d necessary relations",
                    result.solutions_count, len(result.possible_relations), len(result.necessary_relations))
        return result


def calc_solution(problem, solver=None, max_solutions=config.DEFAULT_MAX_SOLUTIONS,
                  exclusion=config.DEFAULT_EXCLUSION, raise_on_infeasible=False):
    """
    Compiles, solves and analyses ``problem``.

    Returns an empty :class:`Solution` when no compatible value function exists,
    unless ``raise_on_infeasible`` is set.
    """
    engine = RelationEngine(problem, solver=solver, exclusion=exclusion)
    try:
        return engine.run(max_solutions)
    except InfeasibleModelError as e:
        if raise_on_infeasible:
            raise
        logger.warning("%s", e)
        return Solution()
