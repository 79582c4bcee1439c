import os
import traceback
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class LogLevel(Enum):
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40


class Slogger:
    """
    Append-only file logger for the application and repository layers.

    Every line is `timestamp - LEVEL - message | key=value | ...`; the paging
    core logs through the standard `logging` module instead.
    """

    log_path = "logs/product_browser.log"
    min_level = LogLevel.INFO

    @classmethod
    def configure(cls, log_path: Optional[str] = None, level: Optional[str] = None) -> None:
        """
        Point the logger at a file and set the minimum level.

        Args:
            log_path: Path of the log file (directories are created on demand)
            level: DEBUG, INFO, WARNING or ERROR, any case; unknown names mean INFO
        """
        if log_path:
            cls.log_path = log_path
        if level:
            cls.min_level = LogLevel.__members__.get(level.upper(), LogLevel.INFO)

    @classmethod
    def _write(cls, text: str) -> None:
        log_dir = os.path.dirname(cls.log_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        with open(cls.log_path, "a", encoding="utf-8") as f:
            f.write(text)

    @staticmethod
    def _line(message: str, level: LogLevel, context: Optional[Dict[str, Any]]) -> str:
        stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        parts = [f"{stamp} - {level.name} - {message}"]
        parts.extend(f"{k}={v}" for k, v in (context or {}).items())
        return " | ".join(parts) + "\n"

    @classmethod
    def log(cls, message: str, level: LogLevel = LogLevel.INFO, context: Optional[Dict[str, Any]] = None):
        """Write one line if `level` passes the configured minimum."""
        if level.value < cls.min_level.value:
            return
        cls._write(cls._line(message, level, context))

    @classmethod
    def debug(cls, message: str, context: Optional[Dict[str, Any]] = None):
        cls.log(message, LogLevel.DEBUG, context)

    @classmethod
    def info(cls, message: str, context: Optional[Dict[str, Any]] = None):
        cls.log(message, LogLevel.INFO, context)

    @classmethod
    def warning(cls, message: str, context: Optional[Dict[str, Any]] = None):
        cls.log(message, LogLevel.WARNING, context)

    @classmethod
    def error(cls, message: str, context: Optional[Dict[str, Any]] = None):
        cls.log(message, LogLevel.ERROR, context)

    @classmethod
    def exception(cls, e: Exception, message: str = "Exception occurred", context: Optional[Dict[str, Any]] = None):
        """
        Log an exception followed by its traceback.

        Args:
            e: The exception to log
            message: What was being attempted
            context: Optional dictionary of contextual information
        """
        error_context = dict(context or {})
        error_context["exception_type"] = type(e).__name__
        error_context["exception_message"] = str(e)
        cls.error(f"{message}: {type(e).__name__} - {e}", error_context)

        trace = "".join(traceback.format_exception(type(e), e, e.__traceback__))
        cls._write(cls._line("TRACEBACK:", LogLevel.ERROR, None) + trace + "\n")
