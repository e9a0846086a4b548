"""Root of the turnaround domain error hierarchy."""


class TurnaroundError(Exception):
    """Base class for every domain error.

    Each subclass names one rejected precondition. Rejected calls leave the
    turnaround unchanged, so repeating the same call fails the same way.
    """
