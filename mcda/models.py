import numpy as np

class LevelIndex:
    """
    Characteristic points of every criterion and the rank of each alternative on them.
    """
    def __init__(self, ch_p):
        """
        Args:
            ch_p (list of arrays): Sorted distinct evaluations (characteristic points) for each criterion.
        """
        self.ch_p = [np.asarray(cp, dtype=float) for cp in ch_p]
        self.num_criteria = len(self.ch_p)
        self.level_numbers = np.array([len(cp) for cp in self.ch_p], dtype=int)
        self.total_points = int(np.sum(self.level_numbers))
        # Offset of each criterion's first point inside any per-point block
        self.offsets = np.concatenate(([0], np.cumsum(self.level_numbers)[:-1])).astype(int)

    @classmethod
    def from_alternatives(cls, data_matrix):
        """
        Alternative constructor: the characteristic points of a criterion are the
        distinct values observed on it, in increasing order.
        """
        data_matrix = np.asarray(data_matrix, dtype=float)
        return cls([np.unique(data_matrix[:, j]) for j in range(data_matrix.shape[1])])

    def ranks(self, data_matrix):
        """
        Vectorized rank lookup.
        Returns: np.ndarray (N_alternatives, N_criteria) of zero-based point indices.
        Raises ValueError if a value is not one of the characteristic points.
        """
        data_matrix = np.atleast_2d(np.asarray(data_matrix, dtype=float))
        N, M = data_matrix.shape
        ranks = np.zeros((N, M), dtype=int)

        for j in range(M):
            points = self.ch_p[j]
            idx = np.searchsorted(points, data_matrix[:, j])
            idx = np.clip(idx, 0, len(points) - 1)
            missing = points[idx] != data_matrix[:, j]
            if np.any(missing):
                raise ValueError(f"Value {data_matrix[missing, j][0]} is not a characteristic point of criterion {j}")
            ranks[:, j] = idx

        return ranks

    def evaluate(self, marginal_values, data_matrix):
        """
        Additive value of arbitrary evaluations under piecewise-linear marginal functions.

        Args:
            marginal_values (list of arrays): Marginal value at each characteristic point, per criterion.
            data_matrix (np.ndarray): (N_alternatives, N_criteria) raw evaluations. Values between
                two characteristic points are interpolated linearly.
        """
        data_matrix = np.atleast_2d(np.asarray(data_matrix, dtype=float))
        total = np.zeros(data_matrix.shape[0])
        for j in range(self.num_criteria):
            total += np.interp(data_matrix[:, j], self.ch_p[j], np.asarray(marginal_values[j], dtype=float))
        return total
