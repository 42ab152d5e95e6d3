from mcda.models import LevelIndex
from mcda.problem import CriterionShape, Problem, build_problem
