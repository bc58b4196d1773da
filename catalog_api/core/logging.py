"""
Настройка логирования приложения.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """
    Настроить корневой логгер.

    Args:
        level: Уровень логирования (DEBUG/INFO/WARNING/ERROR)
    """
    root = logging.getLogger()
    if not any(getattr(h, "_catalog_handler", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._catalog_handler = True
        root.addHandler(handler)
    root.setLevel(level.upper())

    # boto3 слишком разговорчив на INFO
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("boto3").setLevel(logging.WARNING)
