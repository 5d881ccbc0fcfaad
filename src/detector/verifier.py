"""LP burn verification.

A Transfer log to the dead address only says some token moved there. To call
it an LP burn we re-derive the transfer from the transaction itself:

1. the transaction is mined,
2. its calldata is a `transfer(address,uint256)` call,
3. the called contract names itself "Uniswap..." (pair heuristic),
4. the calldata decodes to (recipient, amount),
5. the decoded recipient is the dead address,
6. the contract answers totalSupply/token0/token1,
7. exactly one side of the pair is WETH; the other side is the token we report.

Any failed step raises NotABurnError. Step 6 raises MalformedPoolError so it
can be logged apart from plain mismatches.
"""

from eth_abi import decode
from eth_abi.exceptions import DecodingError
from loguru import logger

from src.chain.abi import TRANSFER_ARG_TYPES, TRANSFER_SELECTOR, same_address
from src.chain.exceptions import ChainReadError
from src.chain.models import ChainTransaction
from src.chain.reader import ChainReader
from src.detector.exceptions import MalformedPoolError, NotABurnError
from src.detector.models import CandidateBurn, PoolInfo, VerifiedBurn

UNISWAP_NAME_MARKER = "Uniswap"


class BurnVerifier:
    """Decides whether one transaction is a genuine Uniswap V2 LP burn."""

    def __init__(
        self,
        reader: ChainReader,
        *,
        dead_address: str,
        weth_address: str,
    ) -> None:
        self._reader = reader
        self._dead_address = dead_address
        self._weth_address = weth_address

    async def verify(self, tx_hash: str) -> VerifiedBurn:
        tx = await self._fetch_transaction(tx_hash)
        check_transfer_selector(tx.input, tx_hash)

        if not tx.to:
            raise NotABurnError("contract creation, no pool address", tx_hash)
        pool_address = tx.to

        pool_name = await self._check_pool_name(pool_address, tx_hash)
        candidate = decode_transfer(tx, pool_address)

        if not same_address(candidate.decoded_recipient, self._dead_address):
            raise NotABurnError(
                f"tokens not sent to dead address: {candidate.decoded_recipient}", tx_hash
            )

        pool = await self._read_pool(pool_address, pool_name, tx_hash)
        token_address = select_underlying_token(
            pool.token0, pool.token1, self._weth_address, tx_hash
        )

        logger.debug(
            f"[VERIFY] {tx_hash[:12]} burn of {candidate.decoded_amount} LP "
            f"from {pool_address} ({pool_name}), token {token_address}"
        )
        return VerifiedBurn(candidate=candidate, pool=pool, token_address=token_address)

    async def _fetch_transaction(self, tx_hash: str) -> ChainTransaction:
        try:
            tx = await self._reader.get_transaction(tx_hash)
        except ChainReadError as e:
            raise NotABurnError(f"failed to get transaction: {e}", tx_hash) from e
        if tx is None:
            raise NotABurnError("transaction not found", tx_hash)
        if tx.is_pending:
            raise NotABurnError("transaction is still pending", tx_hash)
        return tx

    async def _check_pool_name(self, pool_address: str, tx_hash: str) -> str:
        try:
            name = await self._reader.name(pool_address)
        except ChainReadError as e:
            raise NotABurnError(f"failed to get LP name: {e}", tx_hash) from e
        if UNISWAP_NAME_MARKER not in name:
            raise NotABurnError(f"not a Uniswap LP: {name!r}", tx_hash)
        return name

    async def _read_pool(self, pool_address: str, name: str, tx_hash: str) -> PoolInfo:
        try:
            total_supply = await self._reader.total_supply(pool_address)
            token0 = await self._reader.token0(pool_address)
            token1 = await self._reader.token1(pool_address)
        except ChainReadError as e:
            raise MalformedPoolError(f"pair ABI call failed: {e}", tx_hash) from e
        return PoolInfo(
            address=pool_address,
            name=name,
            token0=token0,
            token1=token1,
            total_supply=total_supply,
        )


def check_transfer_selector(calldata: bytes, tx_hash: str = "") -> None:
    """Calldata must start with the transfer(address,uint256) selector."""
    if len(calldata) < 4:
        raise NotABurnError("transaction data too short", tx_hash)
    selector = calldata[:4].hex()
    if selector != TRANSFER_SELECTOR:
        raise NotABurnError(f"not a transfer function call: {selector}", tx_hash)


def decode_transfer(tx: ChainTransaction, pool_address: str) -> CandidateBurn:
    try:
        recipient, amount = decode(TRANSFER_ARG_TYPES, tx.input[4:])
    except DecodingError as e:
        raise NotABurnError(f"failed to decode transfer data: {e}", tx.hash) from e
    return CandidateBurn(
        transaction_hash=tx.hash,
        pool_address=pool_address,
        decoded_recipient=recipient,
        decoded_amount=int(amount),
    )


def select_underlying_token(
    token0: str, token1: str, weth_address: str, tx_hash: str = ""
) -> str:
    """Return the pair side that is not WETH.

    Pairs where neither or both sides are WETH have no single underlying token
    and are rejected.
    """
    token0_is_weth = same_address(token0, weth_address)
    token1_is_weth = same_address(token1, weth_address)
    if token0_is_weth and not token1_is_weth:
        return token1
    if token1_is_weth and not token0_is_weth:
        return token0
    if token0_is_weth:
        raise NotABurnError("both pair tokens are WETH", tx_hash)
    raise NotABurnError(f"pair has no WETH side: {token0}/{token1}", tx_hash)
