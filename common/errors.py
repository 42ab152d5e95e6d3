class UtaGmsError(Exception):
    """Base class for every error raised while building or solving a problem."""


class ShapeError(UtaGmsError, ValueError):
    """Malformed alternatives table, shape vector or preference table."""

    def __init__(self, message, criterion=None):
        super().__init__(message)
        self.criterion = criterion


class ParameterError(UtaGmsError, ValueError):
    """Out-of-range numeric parameter (big-M constant or eps)."""

    def __init__(self, message, name=None, value=None):
        super().__init__(message)
        self.name = name
        self.value = value


class PreferenceInconsistencyError(UtaGmsError, ValueError):
    """Self pair, out-of-range index or contradictory judgments."""

    def __init__(self, message, pair=None):
        super().__init__(message)
        self.pair = pair


class InfeasibleModelError(UtaGmsError):
    """
    No additive value function is compatible with the judgments.

    Raised after the oracle reports a non-zero status on the first solve.
    """

    def __init__(self, message, status=None):
        super().__init__(message)
        self.status = status
