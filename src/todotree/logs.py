"""
Logging for todotree.

Console output goes to stderr so list and export output on stdout stays
machine-readable. A detailed log is also written under TODOTREE_LOG_DIR
when that directory can be created.
"""
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Union

LOGGER_NAME = 'todotree'
LOG_FILE = 'todotree.log'
DEFAULT_LOG_DIR = Path.home() / ".local" / "share" / "todotree" / "logs"

DETAILED_FORMAT = '[%(asctime)s] %(levelname)-8s [%(name)s:%(funcName)s:%(lineno)d] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _debug_enabled() -> bool:
    return os.getenv('TODOTREE_DEBUG', '').lower() in ('1', 'true', 'yes')


def console_level(verbosity: int = 0) -> int:
    """Pick the console level from ``-v`` count and the environment.

    TODOTREE_DEBUG wins, then the ``-v`` count (one for INFO, two for
    DEBUG), then TODOTREE_LOG_LEVEL. The default is WARNING.
    """
    if _debug_enabled() or verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    env_level = os.getenv('TODOTREE_LOG_LEVEL', '').upper()
    if env_level:
        level = logging.getLevelName(env_level)
        if isinstance(level, int):
            return level
    return logging.WARNING


def _file_handler(log_dir: Path, logger: logging.Logger) -> Optional[logging.Handler]:
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_dir / LOG_FILE, encoding='utf-8')
    except OSError as e:
        logger.debug(f"File logging disabled: {e}")
        return None
    handler.setFormatter(logging.Formatter(DETAILED_FORMAT, DATE_FORMAT))
    handler.setLevel(logging.DEBUG)
    return handler


def setup_logging(verbosity: int = 0, log_dir: Union[Path, str, None] = None) -> logging.Logger:
    """(Re)configure the ``todotree`` logger and return it."""
    level = console_level(verbosity)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter(
        '%(levelname)-8s [%(name)s] %(message)s' if level <= logging.DEBUG
        else '%(levelname)s: %(message)s'
    ))
    console.setLevel(level)
    logger.addHandler(console)

    if log_dir is None:
        log_dir = os.getenv('TODOTREE_LOG_DIR') or DEFAULT_LOG_DIR
    handler = _file_handler(Path(log_dir), logger)
    if handler is not None:
        logger.addHandler(handler)

    logger.propagate = False
    return logger

setup_logging()

def get_logger(name: str = None) -> logging.Logger:
    """Logger for a todotree module, e.g. ``get_logger("io")``."""
    if name:
        return logging.getLogger(f'{LOGGER_NAME}.{name}')
    return logging.getLogger(LOGGER_NAME)
