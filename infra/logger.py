from __future__ import annotations

import logging
from typing import Optional


_logger: Optional[logging.Logger] = None

FORMATO = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _nivel(level: str | int) -> int:
    if isinstance(level, str):
        return logging.getLevelName(level.upper())
    return level


def get_logger(name: str = "reportes", level: str | int | None = None) -> logging.Logger:
    """Logger compartido de la app. Si se pasa `level` se aplica aunque ya exista."""
    global _logger
    if _logger is not None:
        if level is not None:
            _logger.setLevel(_nivel(level))
            for h in _logger.handlers:
                h.setLevel(_nivel(level))
        return _logger

    nivel = _nivel(level if level is not None else logging.INFO)

    logger = logging.getLogger(name)
    logger.setLevel(nivel)

    if not logger.handlers:
        ch = logging.StreamHandler()
        ch.setLevel(nivel)
        ch.setFormatter(logging.Formatter(FORMATO))
        logger.addHandler(ch)

    _logger = logger
    return logger
