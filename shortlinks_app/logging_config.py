"""Logging configuration for the shortlinks service."""

import logging
import sys


LOGGER_NAME = "shortlinks_app"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Setup logging configuration.
    
    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        
    Returns:
        Configured package logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)
    
    # Remove existing handlers so repeated startups don't duplicate output
    logger.handlers.clear()
    
    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
    
    return logger
