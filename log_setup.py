import logging
import os
from logging.handlers import RotatingFileHandler


def setup_logging(log_path: str, level_name: str = "INFO") -> str:
    """Send application logs to a rotating file next to the config.

    The terminal belongs to curses while the app runs, so there is no console
    handler. Safe to call more than once (handlers are reset).
    """
    os.makedirs(os.path.dirname(log_path) or ".", exist_ok=True)
    level = getattr(logging, str(level_name or "INFO").upper(), logging.INFO)

    handler = RotatingFileHandler(
        log_path, maxBytes=1_000_000, backupCount=3, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    )

    root = logging.getLogger()
    root.handlers = []
    root.setLevel(level)
    root.addHandler(handler)

    logging.getLogger("sqlpeek").info("logging to %s (level=%s)", log_path, level_name)
    return log_path
