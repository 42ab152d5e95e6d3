import logging
import numpy as np
import pandas as pd
from mcda.manager import RankingSystem
from generate_datasets import DatasetGenerator
from experiments.runner import run_batch_experiments
from experiments.metrics import BenchmarkRunner

# ----------------------------------------------------------------------
# Configuration
# ----------------------------------------------------------------------

# Example problem: 4 alternatives, one criterion of every shape
ALTERNATIVES = pd.DataFrame({
    'Alternative': ['a1', 'a2', 'a3', 'a4'],
    'g1': [100, 90, 100, 120],
    'g2': [1000, 1100, 1500, 800],
    'g3': [9, 11, 12, 13],
    'g4': [110, 120, 100, 105],
    'g5': [300, 310, 340, 360],
    'g6': [800, 801, 803, 809],
})
SHAPES = ['GAIN', 'COST', 'NOT_PREDEFINED', 'A_TYPE', 'V_TYPE', 'NON_MON']
STRICT = [('a1', 'a2')]
WEAK = [('a2', 'a3')]
INDIFFERENT = [('a3', 'a4')]

M = 100.0
EPS = 0.001
BACKEND = 'highs'
MAX_SOLUTIONS = 20

# Synthetic benchmark
RUN_BENCHMARK = False
F1 = [8]        # Alternatives
F2 = [3]        # Criteria
F3 = [30]       # % of pairwise comparisons
DATASET_FOLDS = ['datasets']
SUB_FOLD = 'HIGHS_ONES'
HM = 10         # Number of problems per configuration

# ----------------------------------------------------------------------
# Execution
# ----------------------------------------------------------------------

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    # 1. Example problem
    system = RankingSystem(ALTERNATIVES, SHAPES, M=M, eps=EPS, backend=BACKEND, max_solutions=MAX_SOLUTIONS)
    for up, down in STRICT:
        system.add_preference(up, down, kind='strict')
    for up, down in WEAK:
        system.add_preference(up, down, kind='weak')
    for up, down in INDIFFERENT:
        system.add_preference(up, down, kind='indifferent')

    solution = system.run_inference()
    if not solution:
        print("No compatible value function exists for the given judgments.")
    else:
        print(f"\n>>> {solution.solutions_count} compatible value functions")
        print("\nFinal criteria types:\n", system.get_criteria_types())
        print("\nAdditive values:\n", system.get_value_table().round(4))
        print("\nRanking:\n", system.get_ranking_scores())
        print("\nNecessary relations:\n", system.get_relations('necessary').astype(int))
        print("\nPossible relations:\n", system.get_relations('possible').astype(int))

    # 2. Synthetic benchmark
    if RUN_BENCHMARK:
        for dataset_fold in DATASET_FOLDS:
            gen = DatasetGenerator(output_dir=dataset_fold, n_runs=HM, seed=0)
            gen.generate_batch(F1, F2, F3)

        run_batch_experiments(F1, F2, F3, sub_fold=SUB_FOLD, dataset_folds=DATASET_FOLDS,
                              backend=BACKEND, max_solutions=MAX_SOLUTIONS, hm=HM)

        print(f"\n=== Calculating Metrics for {SUB_FOLD} ===")
        runner = BenchmarkRunner(dataset_fold=DATASET_FOLDS[0], sub_fold=SUB_FOLD, F1=F1, F2=F2, F3=F3, hm=HM)
        results = runner.compute_metrics(force=True)
        for key, res in results.items():
            print(key, {k: np.round(v, 3) for k, v in res["mean"].items()})
