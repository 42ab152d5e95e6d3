import os
import json
import numpy as np
from scipy.stats import dirichlet
from tqdm import tqdm
from common import config, utils

class DatasetGenerator:
    """
    Generates synthetic preference-disaggregation problems from a hidden additive
    utility, optionally with inconsistent judgments (which make a problem infeasible).
    """

    def __init__(self, output_dir="datasets", n_runs=20, n_levels=5, seed=None,
                 indifference_threshold=0.0, weak_share=0.0):
        """
        Args:
            n_levels (int): Evaluations are drawn from this many equally spaced values in [0, 1].
            indifference_threshold (float): Pairs whose hidden utilities differ by at most this are indifferent.
            weak_share (float): Share of preferred pairs recorded as weak rather than strict.
        """
        self.output_dir = output_dir
        self.n_runs = n_runs
        self.n_levels = n_levels
        self.indifference_threshold = indifference_threshold
        self.weak_share = weak_share
        self.rng = np.random.default_rng(seed)
        utils.save_path(self.output_dir)

    def _generate_table(self, f1, f2):
        """Evaluations on a coarse grid so that alternatives share characteristic points."""
        grid = np.linspace(0.0, 1.0, self.n_levels)
        return grid[self.rng.integers(0, self.n_levels, size=(f1, f2))]

    def _generate_exponential_utility(self, data_matrix, f2):
        """Generates ground truth utility using Exponential function (monotone on every criterion)."""
        w = dirichlet.rvs(alpha=np.ones(f2), random_state=self.rng)[0]
        c = self.rng.uniform(-10, 10, f2)
        c[np.abs(c) < 1e-5] = 1e-5 # Avoid c=0

        term1 = 1 - np.exp(-c * data_matrix)
        term2 = 1 - np.exp(-c)
        u_j = w * (term1 / term2)
        return np.sum(u_j, axis=1)

    def _judge(self, pair, U, lam):
        """Returns (kind, (a, b)) for one compared pair, flipping it with the logistic noise model."""
        a, b = int(pair[0]), int(pair[1])
        if abs(U[a] - U[b]) <= self.indifference_threshold:
            return 'indifferences', (a, b)

        winner, loser = (a, b) if U[a] > U[b] else (b, a)
        threshold = utils.robust_sigmoid(lam * (U[winner] - U[loser]))
        if self.rng.random() > threshold:
            winner, loser = loser, winner # Inconsistency injection

        kind = 'weak_preferences' if self.rng.random() < self.weak_share else 'strict_preferences'
        return kind, (winner, loser)

    def generate_batch(self, F1, F2, F3, shape='GAIN', lam=None, M=config.DEFAULT_M, eps=config.DEFAULT_EPS):
        """
        Args:
            F1, F2, F3 (lists): Alternatives, criteria and % of all pairs that get judged.
            shape (str): Shape declared for every criterion.
            lam (float, optional): Logistic noise sharpness; None means no inconsistency.
        """
        print(f"Generating datasets in '{self.output_dir}'...")
        params_registry = {"lambda": lam, "shape": shape, "n_levels": self.n_levels}

        for f1 in tqdm(F1, desc="Alternatives (F1)"):
            all_couples = utils.get_combinations(np.arange(f1))
            indices = np.arange(len(all_couples))

            for f2 in F2:
                for f3 in F3:
                    num_dm_dec = max(1, int(np.round(f3 * len(all_couples) / 100)))
                    config_dir = utils.dataset_dir(self.output_dir, f1, f2, f3)

                    for run in range(self.n_runs):
                        ls = self._generate_table(f1, f2)
                        U = self._generate_exponential_utility(ls, f2)

                        self.rng.shuffle(indices)
                        judgments = {'strict_preferences': [], 'weak_preferences': [], 'indifferences': []}
                        for pair in all_couples[indices[:num_dm_dec]]:
                            kind, judged = self._judge(pair, U, np.inf if lam is None else lam)
                            judgments[kind].append(judged)

                        utils.save_problem(
                            os.path.join(config_dir, f"run_{run:03d}"),
                            ls, [shape] * f2, M, eps,
                            true_utility=U,
                            **judgments,
                        )

        params_file = os.path.join(self.output_dir, "generation_params.json")
        with open(params_file, "w") as f:
            json.dump(params_registry, f, indent=4)
        print(f"Generation parameters saved to {params_file}")

if __name__ == "__main__":
    F1 = [8]
    F2 = [3]
    F3 = [30]

    gen = DatasetGenerator(output_dir="datasets", n_runs=10, seed=0)
    gen.generate_batch(F1, F2, F3)
