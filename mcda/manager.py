import numpy as np
import pandas as pd

from common import config
from inference.engine import calc_solution
from inference.relations import relations_frame
from inference.solver import SolverAdapter
from mcda.problem import build_problem

PREFERENCE_KINDS = ('strict', 'weak', 'indifferent')


class RankingSystem:
    """
    Name-based front end: alternatives in a DataFrame (first column = names),
    judgments added by name, relations returned as DataFrames.
    """
    def __init__(self, df_alternatives, shapes, M=config.DEFAULT_M, eps=config.DEFAULT_EPS,
                 backend=config.DEFAULT_BACKEND, max_solutions=config.DEFAULT_MAX_SOLUTIONS):
        self.df = df_alternatives.copy()
        self.names = self.df.iloc[:, 0].values
        self.criteria = list(self.df.columns[1:])
        self.raw_data = self.df.iloc[:, 1:].values.astype(float)

        self.shapes = list(shapes)
        self.M = M
        self.eps = eps
        self.solver = SolverAdapter(backend=backend)
        self.max_solutions = max_solutions
        self.preferences = {kind: [] for kind in PREFERENCE_KINDS}
        self.problem = None
        self.solution = None

    def _index(self, name):
        matches = np.where(self.names == name)[0]
        if len(matches) == 0:
            raise KeyError(f"Unknown alternative: {name!r}")
        return int(matches[0])

    def add_preference(self, preferred_name, other_name, kind='strict'):
        if kind not in PREFERENCE_KINDS:
            raise ValueError(f"Unknown preference kind: {kind!r}; expected one of {PREFERENCE_KINDS}")
        self.preferences[kind].append((self._index(preferred_name), self._index(other_name)))
        # Judgments changed: the next query recompiles from scratch
        self.solution = None

    def build_problem(self):
        return build_problem(
            self.raw_data, self.shapes, self.M, self.eps,
            strict_preferences=self.preferences['strict'] or None,
            weak_preferences=self.preferences['weak'] or None,
            indifferences=self.preferences['indifferent'] or None,
        )

    def run_inference(self):
        self.problem = self.build_problem()
        self.solution = calc_solution(self.problem, solver=self.solver, max_solutions=self.max_solutions)
        return self.solution

    def _ensure_solution(self):
        if self.solution is None:
            self.run_inference()
        return self.solution

    def get_relations(self, kind='necessary'):
        """Boolean DataFrame: cell (a, b) is True when a possibly/necessarily outranks b."""
        solution = self._ensure_solution()
        relations = solution.necessary_relations if kind == 'necessary' else solution.possible_relations
        return relations_frame(relations, len(self.names), self.names)

    def get_value_table(self):
        """Additive values: one row per compatible function, one column per alternative."""
        solution = self._ensure_solution()
        if not solution:
            return pd.DataFrame(columns=self.names)
        return pd.DataFrame(solution.additive_value_functions, columns=self.names)

    def get_criteria_types(self):
        solution = self._ensure_solution()
        if not solution:
            return pd.DataFrame(columns=self.criteria)
        return pd.DataFrame(solution.final_criteria_types, columns=self.criteria)

    def get_ranking_scores(self):
        """Mean value and rank range of each alternative over the compatible functions."""
        solution = self._ensure_solution()
        if not solution:
            return pd.DataFrame(columns=['Alternative', 'Mean Value', 'Best Rank', 'Worst Rank'])
        mean_u = np.mean(solution.additive_value_functions, axis=0)
        return pd.DataFrame({
            'Alternative': self.names,
            'Mean Value': mean_u,
            'Best Rank': solution.rank_bounds[:, 0] + 1,
            'Worst Rank': solution.rank_bounds[:, 1] + 1,
        }).sort_values('Mean Value', ascending=False)
