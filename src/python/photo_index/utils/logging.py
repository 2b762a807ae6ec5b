"""
Logging setup for the photo-index command line.

Library modules only create loggers (``logging.getLogger(__name__)``) and
never configure handlers. The CLI calls setup_logging once per run.

Example:
    >>> from photo_index.utils import setup_logging
    >>> setup_logging('DEBUG', 'logs/index.log')
"""

import logging
import sys
from pathlib import Path
from typing import Iterable, Optional, Union

from photo_index.exceptions import ConfigError

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Capped at WARNING unless a stricter level is requested
NOISY_LOGGERS = ('PIL', 'exifread', 'urllib3', 'sqlalchemy.engine', 'transformers')


def parse_level(level: Union[str, int]) -> int:
    """Turn 'info', 'DEBUG' or a numeric level into a logging level.

    Raises:
        ConfigError: If the name is not a known level
    """
    if isinstance(level, int):
        return level

    value = logging.getLevelName(str(level).strip().upper())
    if not isinstance(value, int):
        raise ConfigError(f"Unknown log level: {level!r}")
    return value


def setup_logging(
    level: Union[str, int] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    format_string: Optional[str] = None,
    quiet: Iterable[str] = NOISY_LOGGERS,
) -> logging.Logger:
    """Configure the root logger for an indexing run.

    Log records go to stderr so that the run summary printed on stdout
    stays clean. Existing root handlers are replaced.

    Args:
        level: Level name or number
        log_file: Optional file that receives the same records
        format_string: Record format; DEFAULT_FORMAT if None
        quiet: Third-party loggers capped at WARNING

    Returns:
        The package logger
    """
    level = parse_level(level)
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding='utf-8'))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name in quiet:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return logging.getLogger('photo_index')
