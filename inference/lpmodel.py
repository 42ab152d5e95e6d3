import copy

import numpy as np

from inference.layout import VariableLayout

DIRECTIONS = ('<=', '>=', '==', '<', '>')


class LpModel:
    """
    Append-only accumulator of a mixed linear/integer program.

    Rows are stored dense and always span ``layout.total_size`` columns. Strict
    directions ('<', '>') are kept symbolically; the solver adapter rewrites them.
    """
    def __init__(self, layout, maximize=False):
        if not isinstance(layout, VariableLayout):
            raise TypeError("layout must be a VariableLayout")
        self.layout = layout
        self.maximize = maximize
        self.obj = self.new_row()
        self.rows = []
        self.dir = []
        self.rhs = []
        # Columns referenced by at least one row or objective term
        self._referenced = np.zeros(layout.total_size, dtype=bool)

    @property
    def n_vars(self):
        return self.layout.total_size

    @property
    def n_rows(self):
        return len(self.rows)

    @property
    def matrix(self):
        if not self.rows:
            return np.empty((0, self.n_vars))
        return np.vstack(self.rows)

    @property
    def types(self):
        return self.layout.kinds()

    def new_row(self):
        return np.zeros(self.layout.total_size)

    def add_constraint(self, row, direction, rhs):
        """Appends a dense row; returns its index."""
        if direction not in DIRECTIONS:
            raise ValueError(f"Unknown constraint direction {direction!r}; expected one of {DIRECTIONS}")
        row = np.asarray(row, dtype=float)
        if row.shape != (self.n_vars,):
            raise ValueError(f"Constraint row has shape {row.shape}, expected ({self.n_vars},)")
        self.rows.append(row)
        self.dir.append(direction)
        self.rhs.append(float(rhs))
        self._referenced |= row != 0
        return len(self.rows) - 1

    def add_terms(self, terms, direction, rhs):
        """
        Sparse convenience form of :meth:`add_constraint`.

        Args:
            terms (iterable of (column, coefficient)): Repeated columns are summed.
        """
        row = self.new_row()
        for col, coef in terms:
            row[col] += coef
        return self.add_constraint(row, direction, rhs)

    def add_objective_term(self, col, coef):
        self.obj[col] += coef
        self._referenced[col] = True

    def unreferenced_columns(self):
        return np.where(~self._referenced)[0]

    def pin_unreferenced(self):
        """
        Forces every variable that no row mentions to zero with one summed row.
        All variables are non-negative, so the sum being 0 pins each of them.
        """
        cols = self.unreferenced_columns()
        if len(cols) == 0:
            return None
        return self.add_terms(((c, 1.0) for c in cols), '==', 0.0)

    def forbid_solution(self, solution, exclusion='ones', threshold=0.5):
        """
        Appends a cut excluding the structural binary assignment found in ``solution``.

        'ones':  sum of the binaries set to 1 <= (their count - 1)
        'full':  sum(ones) - sum(zeros) <= (count of ones - 1)

        Returns the row index, or None if the cut would be the empty row 0 <= -1.
        """
        cols = self.layout.structural_indexes()
        if len(cols) == 0:
            return None
        values = np.asarray(solution, dtype=float)[cols] > threshold
        ones = cols[values]
        zeros = cols[~values]

        if exclusion == 'ones':
            if len(ones) == 0:
                return None
            terms = [(c, 1.0) for c in ones]
        elif exclusion == 'full':
            terms = [(c, 1.0) for c in ones] + [(c, -1.0) for c in zeros]
        else:
            raise ValueError(f"Unknown exclusion {exclusion!r}; expected 'ones' or 'full'")
        return self.add_terms(terms, '<=', len(ones) - 1)

    def copy(self):
        """Independent clone; rows already appended are shared read-only."""
        clone = copy.copy(self)
        clone.obj = self.obj.copy()
        clone.rows = list(self.rows)
        clone.dir = list(self.dir)
        clone.rhs = list(self.rhs)
        clone._referenced = self._referenced.copy()
        return clone

    def __repr__(self):
        return f"LpModel(vars={self.n_vars}, rows={self.n_rows}, maximize={self.maximize})"
