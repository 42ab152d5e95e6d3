"""
Variable layout of the compiled program.

Every program variable lives in one of a fixed sequence of named blocks. The
block order, sizes and offsets form the addressing contract shared by the
constraint generator, the solution interpreter and the relation analyzer, so
the layout is computed once per problem and passed around as a value.
"""
from collections import namedtuple

import numpy as np

CONTINUOUS = 'C'
BINARY = 'B'

CHARACT_POINTS = 'CHARACT_POINTS'
NOT_PREDEFINED_GAIN_POINTS = 'NOT_PREDEFINED_GAIN_POINTS'
NOT_PREDEFINED_COST_POINTS = 'NOT_PREDEFINED_COST_POINTS'
NOT_PREDEFINED_COST_BINARY = 'NOT_PREDEFINED_COST_BINARY'
A_AND_V_TYPE_BINARY = 'A_AND_V_TYPE_BINARY'
MON_DIRECTION_BINARY = 'MON_DIRECTION_BINARY'
CHANGE_MON_BINARY = 'CHANGE_MON_BINARY'
A_TYPE_ZERO_NORM_BINARY = 'A_TYPE_ZERO_NORM_BINARY'
NON_MON_ZERO_NORM_BINARY = 'NON_MON_ZERO_NORM_BINARY'
BEST_EVALUATIONS = 'BEST_EVALUATIONS'
V_TYPE_ONE_NORM_BINARY = 'V_TYPE_ONE_NORM_BINARY'
NON_MON_ONE_NORM_BINARY = 'NON_MON_ONE_NORM_BINARY'
EPS = 'EPS'

# (name, kind, sized per characteristic point or per criterion)
BLOCK_ORDER = (
    (CHARACT_POINTS, CONTINUOUS, 'points'),
    (NOT_PREDEFINED_GAIN_POINTS, CONTINUOUS, 'points'),
    (NOT_PREDEFINED_COST_POINTS, CONTINUOUS, 'points'),
    (NOT_PREDEFINED_COST_BINARY, BINARY, 'criteria'),
    (A_AND_V_TYPE_BINARY, BINARY, 'points'),
    (MON_DIRECTION_BINARY, BINARY, 'points'),
    (CHANGE_MON_BINARY, BINARY, 'points'),
    (A_TYPE_ZERO_NORM_BINARY, BINARY, 'criteria'),
    (NON_MON_ZERO_NORM_BINARY, BINARY, 'points'),
    (BEST_EVALUATIONS, CONTINUOUS, 'criteria'),
    (V_TYPE_ONE_NORM_BINARY, BINARY, 'criteria'),
    (NON_MON_ONE_NORM_BINARY, BINARY, 'points'),
    (EPS, CONTINUOUS, 'single'),
)

# Binaries that describe the shape of a value function; enumeration forbids their assignments
STRUCTURAL_BINARIES = (
    NOT_PREDEFINED_COST_BINARY,
    A_AND_V_TYPE_BINARY,
    MON_DIRECTION_BINARY,
    CHANGE_MON_BINARY,
)

VariableBlock = namedtuple('VariableBlock', ['name', 'start', 'size', 'kind'])


class VariableLayout:
    """
    Immutable address book of the program variables for one problem.
    """
    def __init__(self, level_numbers):
        """
        Args:
            level_numbers (array-like): Number of characteristic points of each criterion.
        """
        self.level_numbers = tuple(int(n) for n in level_numbers)
        self.criteria_number = len(self.level_numbers)
        self.total_points = sum(self.level_numbers)
        self._crit_offsets = tuple(int(o) for o in np.concatenate(([0], np.cumsum(self.level_numbers)[:-1])))

        sizes = {'points': self.total_points, 'criteria': self.criteria_number, 'single': 1}
        blocks = {}
        start = 0
        for name, kind, sized_by in BLOCK_ORDER:
            size = sizes[sized_by]
            blocks[name] = VariableBlock(name, start, size, kind)
            start += size
        self._blocks = blocks
        self.total_size = start

    @classmethod
    def for_problem(cls, problem):
        return cls(problem.level_numbers)

    def __eq__(self, other):
        return isinstance(other, VariableLayout) and self.level_numbers == other.level_numbers

    def __hash__(self):
        return hash(self.level_numbers)

    def __repr__(self):
        return f"VariableLayout(level_numbers={list(self.level_numbers)}, total_size={self.total_size})"

    @property
    def blocks(self):
        return [self._blocks[name] for name, _, _ in BLOCK_ORDER]

    def block(self, name):
        try:
            return self._blocks[name]
        except KeyError:
            allowed = ", ".join(n for n, _, _ in BLOCK_ORDER)
            raise KeyError(f"Unknown variable block {name!r}; expected one of {allowed}") from None

    def block_slice(self, name):
        blk = self.block(name)
        return slice(blk.start, blk.start + blk.size)

    def _check_criterion(self, crit_idx):
        if not 0 <= crit_idx < self.criteria_number:
            raise IndexError(f"Criterion index {crit_idx} out of range [0, {self.criteria_number})")

    def point_index(self, name, crit_idx, point_idx):
        """Column of a per-point variable: block start + points of earlier criteria + point index."""
        self._check_criterion(crit_idx)
        if not 0 <= point_idx < self.level_numbers[crit_idx]:
            raise IndexError(f"Point index {point_idx} out of range [0, {self.level_numbers[crit_idx]}) "
                             f"for criterion {crit_idx}")
        blk = self.block(name)
        return blk.start + self._crit_offsets[crit_idx] + point_idx

    def point_indexes(self, name, crit_idx):
        """Columns of all per-point variables of one criterion, in point order."""
        self._check_criterion(crit_idx)
        start = self.block(name).start + self._crit_offsets[crit_idx]
        return list(range(start, start + self.level_numbers[crit_idx]))

    def criterion_index(self, name, crit_idx):
        """Column of a per-criterion variable."""
        self._check_criterion(crit_idx)
        return self.block(name).start + crit_idx

    def eps_index(self):
        return self.block(EPS).start

    def kinds(self):
        """Variable-kind vector ('C' or 'B') in column order."""
        result = []
        for blk in self.blocks:
            result.extend([blk.kind] * blk.size)
        return result

    def binary_mask(self):
        return np.array([k == BINARY for k in self.kinds()], dtype=bool)

    def structural_indexes(self):
        """Columns of the binaries that determine the structure of a value function."""
        result = []
        for name in STRUCTURAL_BINARIES:
            sl = self.block_slice(name)
            result.extend(range(sl.start, sl.stop))
        return np.array(result, dtype=int)
