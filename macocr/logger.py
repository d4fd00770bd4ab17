# macocr/logger.py
import logging
import sys
from typing import Optional, TextIO

_FORMAT = "%(asctime)s [%(levelname)s] macocr: %(message)s"


class Log:
    """
    Process-wide logger for macocr.

    Server mode logs to stdout next to uvicorn's access log. Batch mode logs
    to stderr so stdout carries only transcripts and export lines.
    """

    _logger: logging.Logger = logging.getLogger("macocr")

    @classmethod
    def configure(cls, log_level: str, stream: Optional[TextIO] = None) -> None:
        """Set the level and point the single handler at ``stream``."""
        cls._logger.setLevel(log_level.upper())
        # uvicorn configures the root logger; keep records from printing twice
        cls._logger.propagate = False
        for handler in list(cls._logger.handlers):
            cls._logger.removeHandler(handler)
        handler = logging.StreamHandler(stream or sys.stdout)
        handler.setFormatter(logging.Formatter(_FORMAT))
        cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str) -> None:
        cls._logger.info(message)

    @classmethod
    def error(cls, message: str) -> None:
        cls._logger.error(message)

    @classmethod
    def warning(cls, message: str) -> None:
        cls._logger.warning(message)

    @classmethod
    def debug(cls, message: str) -> None:
        cls._logger.debug(message)
