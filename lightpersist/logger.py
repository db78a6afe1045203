"""
Logging configuration for LightPersist
"""
import logging

from .config import LOG_LEVEL

def setup_logging():
    """Configure logging for the application"""
    logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO), format="%(asctime)s %(levelname)s %(name)s %(message)s")

def get_logger(name: str = "lightpersist") -> logging.Logger:
    """Get a logger instance with the given name"""
    return logging.getLogger(name)

# Package-wide logger; setup_logging() is called in app.py.
log = get_logger("lightpersist")
