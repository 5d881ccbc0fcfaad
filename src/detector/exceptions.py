class LPBurnError(Exception):
    pass


class NotABurnError(LPBurnError):
    """The transfer is not a genuine Uniswap V2 LP burn."""

    def __init__(self, reason: str, tx_hash: str = "") -> None:
        super().__init__(reason)
        self.reason = reason
        self.tx_hash = tx_hash


class MalformedPoolError(NotABurnError):
    """A qualifying LP transfer whose pool did not answer the pair ABI."""


class NotifierError(LPBurnError):
    """The alert could not be delivered."""
