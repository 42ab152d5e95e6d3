import os
import json
import numpy as np
from tqdm import tqdm
from common.utils import save_path, read_dataset
from experiments.simulation import hidden_relations
from inference.relations import rank_acceptability

class BenchmarkRunner:
    """
    Aggregates the saved enumeration results of a batch against the hidden utilities.

    Metrics per run:
        necessary_share   necessary relations / ordered pairs
        possible_share    possible relations / ordered pairs
        precision         share of necessary relations that agree with the hidden utility
        recall            share of hidden relations recovered as necessary
        rai_entropy       mean entropy of the rank acceptability distributions
    """

    def __init__(self, dataset_fold, sub_fold, F1, F2, F3, hm=None):
        self.dataset_fold = dataset_fold
        self.sub_fold = sub_fold
        self.samples_fold = f'samples_{dataset_fold}'
        self.tests_fold = f'tests_{dataset_fold}'
        self.sub_tests_fold = os.path.join(self.tests_fold, sub_fold)

        self.hm = hm
        self.F1, self.F2, self.F3 = F1, F2, F3

        save_path(self.sub_tests_fold)

    def _run_path(self, f1, f2, f3, run_name, filename):
        return os.path.join(self.samples_fold, f"f1_{f1}_f2_{f2}_f3_{f3}", self.sub_fold, run_name, filename)

    # ----------------------------------------------------------------------
    # Per-run Metrics
    # ----------------------------------------------------------------------

    @staticmethod
    def calc_relation_metrics(necessary, n_alternatives, true_utility):
        truth = hidden_relations(true_utility)
        pairs = n_alternatives * (n_alternatives - 1)
        agreeing = len(necessary & truth)
        return {
            "necessary_share": len(necessary) / pairs,
            "precision": agreeing / len(necessary) if necessary else 1.0,
            "recall": agreeing / len(truth) if truth else 1.0,
        }

    @staticmethod
    def calc_rai_entropy(values):
        """Mean Shannon entropy (nats) of each alternative's rank acceptability distribution."""
        rai = rank_acceptability(values)
        p = np.clip(rai, 1e-12, 1.0)
        return float(np.mean(-np.sum(np.where(rai > 0, rai * np.log(p), 0.0), axis=1)))

    # ----------------------------------------------------------------------
    # Main Computation Loop
    # ----------------------------------------------------------------------

    def compute_metrics(self, force=False):
        """Computes the metrics of every processed run and saves one JSON per configuration."""
        print(f"Calculating metrics for {self.sub_fold}...")
        results = {}

        for f1 in tqdm(self.F1):
            for f2 in self.F2:
                for f3 in self.F3:
                    out_path = os.path.join(self.sub_tests_fold, f"f1_{f1}_f2_{f2}_f3_{f3}.json")
                    if os.path.exists(out_path) and not force:
                        with open(out_path, 'r') as f:
                            results[(f1, f2, f3)] = json.load(f)
                        continue

                    runs = read_dataset(self.dataset_fold, f1, f2, f3)
                    if self.hm is not None:
                        runs = runs[:self.hm]

                    per_run = []
                    for run_name, problem, Us in runs:
                        summary_path = self._run_path(f1, f2, f3, run_name, "summary.json")
                        if not os.path.exists(summary_path):
                            continue
                        with open(summary_path, 'r') as f:
                            summary = json.load(f)

                        row = {"run": run_name, "feasible": summary["feasible"], "solutions": summary["solutions"]}
                        if summary["feasible"]:
                            row["possible_share"] = summary["possible"] / summary["pairs"]
                            necessary_arr = np.load(self._run_path(f1, f2, f3, run_name, "necessary.npy"))
                            necessary = {tuple(int(x) for x in p) for p in necessary_arr.reshape(-1, 2)}
                            if Us is not None:
                                row.update(self.calc_relation_metrics(necessary, problem.alternatives_number, Us))
                            values = np.load(self._run_path(f1, f2, f3, run_name, "values.npy"))
                            row["rai_entropy"] = self.calc_rai_entropy(values)
                        per_run.append(row)

                    aggregated = self.aggregate(per_run)
                    with open(out_path, "w") as f:
                        json.dump({"runs": per_run, "mean": aggregated}, f, indent=4)
                    results[(f1, f2, f3)] = {"runs": per_run, "mean": aggregated}

        return results

    @staticmethod
    def aggregate(per_run):
        """Mean of every numeric metric over the feasible runs, plus the feasible share."""
        feasible = [r for r in per_run if r.get("feasible")]
        out = {"feasible_share": len(feasible) / len(per_run) if per_run else 0.0}
        keys = ("solutions", "possible_share", "necessary_share", "precision", "recall", "rai_entropy")
        for key in keys:
            vals = [r[key] for r in feasible if key in r]
            if vals:
                out[key] = float(np.mean(vals))
        return out
