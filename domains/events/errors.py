"""Exceptions raised by the event reminder domain."""


class EventValidationError(ValueError):
    """Malformed event creation input. Reported to the caller, never retried."""


class IdentityUnavailableError(RuntimeError):
    """The current user's email address could not be resolved."""


class PersistenceFault(RuntimeError):
    """An event could not be written to the store."""
