import os
import sys

from loguru import logger


def setup_logger(
    *, json_logs: bool = False, level: str = "INFO", log_dir: str = "logs"
) -> None:
    """Configure loguru for the burn watcher.

    Console level controlled by LOG_LEVEL env (default: INFO). The daily file
    sink records at DEBUG, so it keeps the per-block transfer lines and RPC
    retries the console hides; rejection reasons are logged at INFO and land
    in both. `log_dir=""` disables the file sink.
    """
    console_level = os.getenv("LOG_LEVEL", level).upper()
    logger.remove()

    if json_logs:
        logger.add(sys.stdout, serialize=True, level=console_level)
    else:
        logger.add(
            sys.stdout,
            format=(
                "<green>{time:HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
                "<level>{message}</level>"
            ),
            level=console_level,
            colorize=True,
        )

    if log_dir:
        logger.add(
            f"{log_dir}/lp_burn_{{time:YYYY-MM-DD}}.log",
            rotation="20 MB",
            retention="7 days",
            compression="gz",
            level="DEBUG",
            serialize=json_logs,
        )
