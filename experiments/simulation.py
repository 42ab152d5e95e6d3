import os
import json
import numpy as np
from inference.engine import calc_solution

def hidden_relations(true_utility, tol=1e-12):
    """Ordered pairs (i, j), i != j, with true_utility[i] >= true_utility[j]."""
    U = np.asarray(true_utility, dtype=float)
    return {(i, j) for i in range(len(U)) for j in range(len(U)) if i != j and U[i] >= U[j] - tol}

def process_single_problem(problem, output_dir, solver=None, max_solutions=50, exclusion='ones', overwrite=False):
    """
    Enumerates compatible value functions for one problem and saves:
        values.npy        additive value table (solutions x alternatives)
        frequency.npy     pairwise outranking frequency
        summary.json      counts of solutions and relations
    Skips the problem if its summary already exists, unless overwrite is set.
    Returns the summary dict.
    """
    summary_path = os.path.join(output_dir, "summary.json")
    if os.path.exists(summary_path) and not overwrite:
        with open(summary_path, 'r') as f:
            return json.load(f)

    solution = calc_solution(problem, solver=solver, max_solutions=max_solutions, exclusion=exclusion)

    summary = {
        "solutions": solution.solutions_count,
        "feasible": bool(solution),
        "possible": len(solution.possible_relations),
        "necessary": len(solution.necessary_relations),
        "pairs": problem.alternatives_number * (problem.alternatives_number - 1),
    }
    if solution:
        np.save(os.path.join(output_dir, "values.npy"), solution.additive_value_functions)
        np.save(os.path.join(output_dir, "frequency.npy"), solution.outranking_frequency)
        np.save(os.path.join(output_dir, "necessary.npy"), np.array(sorted(solution.necessary_relations)))

    with open(summary_path, "w") as f:
        json.dump(summary, f, indent=4)
    return summary
