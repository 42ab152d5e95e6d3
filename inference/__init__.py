from inference.constraints import build_lp_model
from inference.engine import RelationEngine, calc_solution
from inference.layout import VariableLayout
from inference.solution import Solution
from inference.solver import SolverAdapter
