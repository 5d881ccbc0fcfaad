from pydantic_settings import BaseSettings, SettingsConfigDict

DEAD_ADDRESS = "0x000000000000000000000000000000000000dEaD"
WETH_ADDRESS = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Ethereum node (HTTP for calls/tx lookup, WebSocket for the log subscription)
    eth_rpc_url: str = ""
    eth_ws_url: str = ""
    chain_id: int = 1

    # Telegram
    telegram_bot_token: str = ""
    telegram_chat_id: str = ""

    # Well-known addresses
    dead_address: str = DEAD_ADDRESS
    weth_address: str = WETH_ADDRESS

    # RPC call policy
    rpc_timeout_sec: float = 15.0
    rpc_max_retries: int = 3
    rpc_retry_base_delay_sec: float = 0.5

    # Log subscription reconnects (0 = first subscription error is fatal)
    ws_reconnect_delay_sec: float = 3.0
    ws_max_reconnect_delay_sec: float = 60.0
    ws_max_resubscribe_attempts: int = 5

    # Enrichment APIs (both free, no keys)
    enable_goplus: bool = True
    goplus_max_rps: float = 0.5
    enable_geckoterminal: bool = True
    geckoterminal_max_rps: float = 0.5
    gecko_network: str = "eth"

    # Alert links
    explorer_url: str = "https://etherscan.io"

    # Watcher stats line every N logs
    stats_log_every: int = 100

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False

    def missing_required(self) -> list[str]:
        """Names of settings the watcher cannot start without."""
        required = {
            "eth_rpc_url": self.eth_rpc_url,
            "eth_ws_url": self.eth_ws_url,
            "telegram_bot_token": self.telegram_bot_token,
            "telegram_chat_id": self.telegram_chat_id,
        }
        return [name for name, value in required.items() if not value]
