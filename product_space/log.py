import logging
from typing import Optional

from product_space.config import LOG_LEVEL


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Set up console logging for the command line tools.
    Library code never calls this; it only asks for module loggers.
    """
    level = getattr(logging, (level or LOG_LEVEL).upper())

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
        force=True,
    )

    return logging.getLogger("product_space")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for any module.

    Usage in any file:
        logger = get_logger(__name__)
        logger.info("Processing started")
    """
    return logging.getLogger(name)
