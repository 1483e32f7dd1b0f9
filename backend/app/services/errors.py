"""Service-layer errors.

Both subclass ValueError so callers that only care about "the operation was
refused" can keep catching ValueError.
"""


class NotFoundError(ValueError):
    """The target does not exist, or the caller may not act on it."""


class ConflictError(ValueError):
    """The target exists but is no longer in a state that allows the action."""
