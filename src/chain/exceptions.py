class ChainError(Exception):
    pass


class ChainReadError(ChainError):
    """An RPC read failed (after retries for transient errors)."""


class SubscriptionError(ChainError):
    """The log subscription failed and could not be re-established."""
