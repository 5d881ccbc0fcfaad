"""ABI subset shared by ERC-20 tokens and Uniswap V2 pair contracts."""

from web3 import Web3

ERC20_PAIR_ABI = [
    {"name": "name", "inputs": [], "outputs": [{"name": "", "type": "string"}],
     "stateMutability": "view", "type": "function"},
    {"name": "symbol", "inputs": [], "outputs": [{"name": "", "type": "string"}],
     "stateMutability": "view", "type": "function"},
    {"name": "decimals", "inputs": [], "outputs": [{"name": "", "type": "uint8"}],
     "stateMutability": "view", "type": "function"},
    {"name": "totalSupply", "inputs": [], "outputs": [{"name": "", "type": "uint256"}],
     "stateMutability": "view", "type": "function"},
    {"name": "balanceOf", "inputs": [{"name": "_owner", "type": "address"}],
     "outputs": [{"name": "balance", "type": "uint256"}],
     "stateMutability": "view", "type": "function"},
    {"name": "token0", "inputs": [], "outputs": [{"name": "", "type": "address"}],
     "stateMutability": "view", "type": "function"},
    {"name": "token1", "inputs": [], "outputs": [{"name": "", "type": "address"}],
     "stateMutability": "view", "type": "function"},
    {"name": "transfer",
     "inputs": [{"name": "_to", "type": "address"}, {"name": "_value", "type": "uint256"}],
     "outputs": [{"name": "", "type": "bool"}],
     "stateMutability": "nonpayable", "type": "function"},
]

TRANSFER_EVENT_TOPIC = Web3.to_hex(Web3.keccak(text="Transfer(address,address,uint256)"))

# keccak("transfer(address,uint256)")[:4]
TRANSFER_SELECTOR = "a9059cbb"
TRANSFER_ARG_TYPES = ["address", "uint256"]

# LP tokens of Uniswap V2 pairs always use 18 decimals
LP_DECIMALS = 18


def address_to_topic(address: str) -> str:
    """Left-pad a 20-byte address to a 32-byte log topic (lower-case hex)."""
    raw = address.lower().removeprefix("0x")
    return "0x" + raw.rjust(64, "0")


def same_address(a: str | None, b: str | None) -> bool:
    """Case-insensitive hex address comparison."""
    if not a or not b:
        return False
    return a.lower() == b.lower()
