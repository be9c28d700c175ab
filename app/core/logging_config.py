"""
Logging configuration with token masking and optional JSON output
"""
import json
import logging
import re
import sys

from app.core.config import get_settings


class SensitiveDataFilter(logging.Filter):
    """Mask bot tokens embedded in Bot API URLs"""

    SENSITIVE_PATTERNS = [
        (re.compile(r"/bot[^/\s]+(?=/)"), "/bot***"),
        (re.compile(r"(token[\"']?\s*[:=]\s*[\"']?)[^\"'\s,}]+", re.IGNORECASE), r"\1***"),
    ]

    def _mask(self, text: str) -> str:
        for pattern, replacement in self.SENSITIVE_PATTERNS:
            text = pattern.sub(replacement, text)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = self._mask(record.msg)
        if record.args:
            if isinstance(record.args, dict):
                record.args = {
                    key: self._mask(value) if isinstance(value, str) else value
                    for key, value in record.args.items()
                }
            else:
                record.args = tuple(
                    self._mask(arg) if isinstance(arg, str) else arg for arg in record.args
                )
        return True


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line"""

    def format(self, record: logging.LogRecord) -> str:
        log_dict = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_dict["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_dict, ensure_ascii=False)


class LoggingConfig:
    """Logging setup shared by the app"""

    _configured = False

    @classmethod
    def configure(cls):
        if cls._configured:
            return

        settings = get_settings()
        level = settings.log_level.upper()
        log_format = settings.log_format

        handler = logging.StreamHandler(sys.stdout)
        if log_format == "json":
            handler.setFormatter(JSONFormatter())
        else:
            handler.setFormatter(
                logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
            )
        handler.addFilter(SensitiveDataFilter())

        root = logging.getLogger()
        root.setLevel(level)
        root.addHandler(handler)

        # httpx logs full request URLs, which contain the bot token
        logging.getLogger("httpx").setLevel(logging.WARNING)

        cls._configured = True

    @staticmethod
    def get_logger(name: str) -> logging.Logger:
        return logging.getLogger(name)
