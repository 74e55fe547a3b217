"""
Error taxonomy for safety-aware routing.

Expected conditions (a route with no violation, an empty incident set) are
plain return values. Only invalid input and fatal conditions raise.
"""


class SafeRoutingError(Exception):
    """Base class for all safe routing errors."""
    pass


class InputError(SafeRoutingError, ValueError):
    """Degenerate geometry, malformed coordinates or invalid parameters."""
    pass


class NoCandidatesError(SafeRoutingError):
    """Raised when there is nothing to rank."""
    pass


class ProviderUnavailableError(SafeRoutingError):
    """External routing provider or feed failed. Never retried here."""

    def __init__(self, message: str, provider: str = "routing"):
        super().__init__(message)
        self.provider = provider


class AllExcludedWarning(UserWarning):
    """Every candidate crossed a no-go zone; ranking used the unfiltered set."""
    pass
