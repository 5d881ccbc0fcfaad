"""Records read from the chain."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TransferLog:
    """A Transfer log delivered by the subscription."""

    transaction_hash: str
    block_number: int
    topics: tuple[str, ...]
    data: str
    address: str = ""
    log_index: int = 0
    removed: bool = False


@dataclass(frozen=True)
class ChainTransaction:
    """The subset of a transaction the verifier looks at."""

    hash: str
    to: str | None  # None for contract creation
    input: bytes
    block_number: int | None  # None while pending

    @property
    def is_pending(self) -> bool:
        return self.block_number is None
