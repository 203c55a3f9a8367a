"""
Centralized logging configuration for the application.

Console output always goes to stderr: with the stdio transport, stdout carries
MCP protocol frames and any stray log line would corrupt the stream.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import AppConfig

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Third-party loggers that are chatty at INFO during every MCP request
QUIET_LOGGERS = ('mcp', 'httpx', 'uvicorn.access')


def _build_handlers(config: AppConfig) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if config.log_file:
        try:
            log_path = Path(config.log_file).expanduser()
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_path, mode='a', encoding='utf-8'))
        except OSError as e:
            print(f'Could not open log file {config.log_file}: {e}', file=sys.stderr)

    return handlers


def setup_logging(config: Optional[AppConfig] = None) -> None:
    """
    Setup centralized logging configuration.

    Args:
        config: AppConfig instance, uses default if None
    """
    if config is None:
        from .config import config as default_config
        config = default_config

    level = getattr(logging, config.log_level.upper())
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=_build_handlers(config))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: str, config: Optional[AppConfig] = None) -> logging.Logger:
    """
    Get a logger with proper configuration.

    Args:
        name: Logger name (usually __name__)
        config: AppConfig instance, uses default if None

    Returns:
        Configured logger instance
    """
    if config is None:
        from .config import config as default_config
        config = default_config

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, config.log_level.upper()))
    return logger
