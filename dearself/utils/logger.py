import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

DEFAULT_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'

def setup_logging(level: str = "INFO", log_file: Optional[str] = None,
                  fmt: str = DEFAULT_FORMAT, max_bytes: int = 10_000_000,
                  backup_count: int = 5) -> logging.Logger:
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(fmt)

    # Idempotent: repeated calls (tests, reload) must not stack handlers
    for handler in list(logger.handlers):
        if getattr(handler, "_dearself", False):
            logger.removeHandler(handler)
            handler.close()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    console._dearself = True
    logger.addHandler(console)

    if log_file:
        Path(log_file).parent.mkdir(exist_ok=True, parents=True)
        handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
        handler.setFormatter(formatter)
        handler._dearself = True
        logger.addHandler(handler)

    return logger

def setup_from_config(config) -> logging.Logger:
    log_file = str(config.logging.file_path) if config.logging.to_file else None
    return setup_logging(config.logging.level.value, log_file, config.logging.format)
