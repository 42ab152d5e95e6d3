import os
from tqdm import tqdm
from common import utils
from experiments.simulation import process_single_problem
from inference.solver import SolverAdapter

def run_batch_experiments(F1, F2, F3, sub_fold, dataset_folds, backend='highs', max_solutions=50,
                          exclusion='ones', overwrite=False, hm=None):
    """
    Orchestrates the experiments across multiple datasets and configurations.

    Args:
        sub_fold (str): Name of the result folder for this method configuration.
        hm (int, optional): Number of problems (runs) to process per configuration.
                            If None, processes all available in the dataset.
    """
    solver = SolverAdapter(backend=backend)

    for dataset_fold in dataset_folds:
        print(f"\n=== Processing Dataset: {dataset_fold} ===")
        samples_root = f"samples_{dataset_fold}"

        for f1 in F1:
            for f2 in F2:
                for f3 in F3:
                    try:
                        runs = utils.read_dataset(dataset_fold, f1, f2, f3)
                    except FileNotFoundError as e:
                        print(f"Skipping {f1}/{f2}/{f3}: {e}")
                        continue

                    if hm is not None:
                        runs = runs[:hm]

                    method_dir = os.path.join(samples_root, f"f1_{f1}_f2_{f2}_f3_{f3}", sub_fold)
                    for run_name, problem, _ in tqdm(runs, desc=f"  f1={f1} f2={f2} f3={f3}", leave=False):
                        run_dir = os.path.join(method_dir, run_name)
                        utils.save_path(run_dir)
                        process_single_problem(
                            problem,
                            output_dir=run_dir,
                            solver=solver,
                            max_solutions=max_solutions,
                            exclusion=exclusion,
                            overwrite=overwrite,
                        )
