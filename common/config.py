# ----------------------------------------------------------------------
# Library defaults
# ----------------------------------------------------------------------

# Big-M constant. Marginal values live in [0, 1], so any M > 1 relaxes a conditional row.
DEFAULT_M = 100.0
DEFAULT_EPS = 1e-3

# Oracle back-end: 'highs' (scipy.optimize.milp) or 'cvxpy'
DEFAULT_BACKEND = 'highs'
# Mixed-integer solvers tried in order when the cvxpy back-end gets no explicit one
CVXPY_MIP_SOLVERS = ('HIGHS', 'GLPK_MI', 'CBC', 'SCIP', 'SCIPY')

# Upper bound on enumerated compatible value functions (None = until infeasible)
DEFAULT_MAX_SOLUTIONS = 100
# Exclusion cut used between two enumeration rounds: 'ones' or 'full'
DEFAULT_EXCLUSION = 'ones'

# Absolute tolerance used when comparing additive values of two alternatives
RELATION_TOLERANCE = 1e-6
# Solver values above this threshold are read as binary 1
BINARY_THRESHOLD = 0.5
