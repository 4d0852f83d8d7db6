"""
Logger module for XTE
"""
import logging
import os
from typing import Optional

FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Library modules log through children of this logger
logger = logging.getLogger('xte')


def setup_logging(level: int = logging.INFO, log_path: Optional[str] = None) -> logging.Logger:
    """Attach console (and optionally file) handlers to the package logger."""
    logger.setLevel(level)
    formatter = logging.Formatter(FORMAT)

    if not any(isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
               for h in logger.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_path:
        directory = os.path.dirname(log_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if name:
        return logger.getChild(name)
    return logger
