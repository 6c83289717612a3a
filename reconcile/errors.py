"""Error types for reconciler assembly."""


class WiringError(RuntimeError):
    """Raised when the reconciler is assembled inconsistently, e.g. an actor's reactor is missing."""
