"""
Logger Module
Centralized logging using Loguru
"""

import sys
from pathlib import Path

from loguru import logger as _logger


def setup_logger(
    level: str = "INFO",
    log_file: str = "./logs/cargo.log",
    max_size: int = 10,
    backup_count: int = 5,
    console: bool = True,
    colorize: bool = True,
) -> None:
    """Setup logger with file and console handlers"""

    _logger.remove()

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    if console:
        _logger.add(
            sys.stdout,
            level=level,
            format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{module}</cyan>:<cyan>{function}</cyan> | <level>{message}</level>",
            colorize=colorize,
        )

    _logger.add(
        log_file,
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {module}:{function} | {message}",
        rotation=f"{max_size} MB",
        retention=backup_count,
        encoding="utf-8",
    )


logger = _logger
