import os
import logging
from pathlib import Path
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 5

DATA_DIR = Path(os.getenv("TASKMAN_DATA_DIR", "data"))
LOG_LEVEL = os.getenv("TASKMAN_LOG_LEVEL", "WARNING").upper()


def get_history_limit() -> int:
    """
    Reads TASKMAN_HISTORY_LIMIT, falling back to the default for anything
    that is not a positive integer.
    """
    raw = os.getenv("TASKMAN_HISTORY_LIMIT")
    if raw is None:
        return DEFAULT_HISTORY_LIMIT
    try:
        limit = int(raw)
    except ValueError:
        logger.warning(f"Ignoring TASKMAN_HISTORY_LIMIT={raw!r}, using {DEFAULT_HISTORY_LIMIT}")
        return DEFAULT_HISTORY_LIMIT
    if limit < 1:
        logger.warning(f"TASKMAN_HISTORY_LIMIT must be >= 1, using {DEFAULT_HISTORY_LIMIT}")
        return DEFAULT_HISTORY_LIMIT
    return limit


def setup_logging(level: str = LOG_LEVEL):
    """
    Routes log records to stderr through rich. Safe to call more than once.
    """
    root = logging.getLogger()
    if any(isinstance(h, RichHandler) for h in root.handlers):
        root.setLevel(level)
        return
    handler = RichHandler(console=Console(stderr=True), show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    root.setLevel(level)
