# moviedeck/core/logger.py

import sys
import logging

# ─── Custom Formatter ────────────────────────────────────────────────────────
class CategoryFormatter(logging.Formatter):
    def format(self, record):
        if not hasattr(record, "category"):
            record.category = record.name.upper()
        return super().format(record)

# shared formatter for the console handler
formatter = CategoryFormatter(
    fmt="%(asctime)s %(levelname)-8s [%(category)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)

# ─── Public API ───────────────────────────────────────────────────────────────
def setup_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    # Prevent duplicate logging by disabling propagation
    logger.propagate = False

    # Console → stdout
    ch = logging.StreamHandler(sys.stdout)
    ch.setLevel(level)
    ch.setFormatter(formatter)
    logger.addHandler(ch)

    return logger


def set_level(level_name: str) -> None:
    """Apply a level name from settings to every moviedeck logger."""
    level = getattr(logging, level_name.upper(), logging.INFO)
    for name, obj in logging.Logger.manager.loggerDict.items():
        if name.startswith("moviedeck") and isinstance(obj, logging.Logger):
            obj.setLevel(level)
            for handler in obj.handlers:
                handler.setLevel(level)
