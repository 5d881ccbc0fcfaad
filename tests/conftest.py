"""Shared test fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from eth_abi import encode

from src.chain.models import ChainTransaction

DEAD = "0x000000000000000000000000000000000000dEaD"
WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
POOL = "0x1111111111111111111111111111111111111111"
TOKEN = "0x2222222222222222222222222222222222222222"
TX_HASH = "0x" + "ab" * 32

LP_SUPPLY = 1_000_000 * 10**18
LP_BURNED = 10_000 * 10**18
TOKEN_SUPPLY = 1_000_000 * 10**18
TOKEN_SELF_BALANCE = 50_000 * 10**18


def transfer_calldata(to: str, amount: int) -> bytes:
    return bytes.fromhex("a9059cbb") + encode(["address", "uint256"], [to.lower(), amount])


@pytest.fixture
def burn_tx() -> ChainTransaction:
    return ChainTransaction(
        hash=TX_HASH,
        to=POOL,
        input=transfer_calldata(DEAD, LP_BURNED),
        block_number=19_000_000,
    )


@pytest.fixture
def reader(burn_tx: ChainTransaction) -> MagicMock:
    """ChainReader stand-in answering for a genuine TOKEN/WETH LP burn."""
    supplies = {POOL: LP_SUPPLY, TOKEN: TOKEN_SUPPLY}

    mock = MagicMock()
    mock.get_transaction = AsyncMock(return_value=burn_tx)
    mock.name = AsyncMock(return_value="Uniswap V2")
    mock.total_supply = AsyncMock(side_effect=lambda address: supplies[address])
    mock.token0 = AsyncMock(return_value=TOKEN)
    mock.token1 = AsyncMock(return_value=WETH)
    mock.decimals = AsyncMock(return_value=18)
    mock.balance_of = AsyncMock(return_value=TOKEN_SELF_BALANCE)
    return mock
