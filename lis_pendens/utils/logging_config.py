import sys
from pathlib import Path

from loguru import logger

from lis_pendens.utils.logging_utils import add_optional_sinks, env_log_level

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message} | {extra}"


def configure_logger(
    log_file: str = "lis_pendens.log",
    level: str | None = None,
    log_dir: str | Path = "logs",
) -> None:
    """
    Configure loguru for a resolver run.

    Console output goes to stderr so JSON lines on stdout stay clean.
    """
    level = (level or env_log_level()).upper()
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level)
    logger.add(
        log_dir / log_file,
        rotation="10 MB",
        retention="10 days",
        level=level,
        format=FILE_FORMAT,
        backtrace=True,
        diagnose=False,
    )

    add_optional_sinks(log_dir)
