# errors.py
# Exceptions raised by the tour engine.


class TspError(Exception):
    """Base class for tour engine failures."""


class InsufficientPoints(TspError, ValueError):
    """Raised when a solve is asked for with fewer than 2 points."""

    def __init__(self, n: int, required: int = 2):
        self.n = n
        self.required = required
        super().__init__(f"need at least {required} points to solve, got {n}")
