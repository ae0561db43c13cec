"""日志配置模块：统一控制台/文件输出格式，并为每条记录附加请求 ID。"""

import json
import logging
import logging.config
import re
import sys
from contextvars import ContextVar
from datetime import datetime
from typing import Optional

from .config import get_settings


class _TZFormatter(logging.Formatter):
    """按 Settings.timezone 渲染时间戳，未指定 datefmt 时输出毫秒级 ISO-8601。"""

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: D401
        tz = get_settings().timezone_info
        dt = datetime.fromtimestamp(record.created, tz)
        if datefmt:
            return dt.strftime(datefmt)
        return dt.isoformat(sep=" ", timespec="milliseconds")


class ColorFormatter(_TZFormatter):
    """ANSI 彩色格式化器：根据不同日志级别渲染不同颜色。"""

    RESET = "\033[0m"
    COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[41m",
    }

    def __init__(
        self,
        fmt: str,
        datefmt: Optional[str] = None,
        style: str = "%",
        use_colors: Optional[bool] = None,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt, style=style)
        if use_colors is None:
            use_colors = sys.stderr.isatty()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if not self.use_colors:
            return message
        color = self.COLORS.get(record.levelno)
        if not color:
            return message
        return f"{color}{message}{self.RESET}"


class JsonFormatter(_TZFormatter):
    """Structured JSON formatter for log shipping."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, datefmt=None),
            "logger": record.name,
            "level": record.levelname,
            "msg": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


_request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


class RequestIdFilter(logging.Filter):
    """Injects request_id from contextvars into every LogRecord."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        setattr(record, "request_id", _request_id_ctx.get())
        return True


class SecretRedactionFilter(logging.Filter):
    """屏蔽日志中的一次性口令字段，防止临时密码落盘。"""

    _PATTERN = re.compile(r"(?i)((?:temp_password|password|test_password)['\"]?\s*[:=]\s*['\"]?)([^'\",\s}]+)")

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        message = record.getMessage()
        redacted = self._PATTERN.sub(r"\1***", message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def setup_logging() -> None:
    """初始化日志系统，确保所有模块使用统一的输出格式与级别。"""
    settings = get_settings()
    log_dir = settings.log_directory
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file_path = settings.log_file_path

    json_enabled = bool(settings.log_json)
    formatter_name = "json" if json_enabled else "standard"
    module = "app.packages.hierarchy.core.logger"

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "()": f"{module}.ColorFormatter",
                "format": "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s",
            },
            "plain": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s",
            },
            "json": {
                "()": f"{module}.JsonFormatter",
            },
        },
        "filters": {
            "request_id": {"()": f"{module}.RequestIdFilter"},
            "redact": {"()": f"{module}.SecretRedactionFilter"},
        },
        "handlers": {
            "default": {
                "level": settings.log_level,
                "class": "logging.StreamHandler",
                "formatter": formatter_name,
                "filters": ["request_id", "redact"],
            },
            "file": {
                "level": settings.log_level,
                "class": "logging.handlers.TimedRotatingFileHandler",
                "formatter": formatter_name if json_enabled else "plain",
                "filename": str(log_file_path),
                "when": "midnight",
                "backupCount": 14,
                "encoding": "utf-8",
                "delay": True,
                "filters": ["request_id", "redact"],
            },
        },
        "loggers": {
            "uvicorn": {
                "handlers": ["default", "file"],
                "level": settings.log_level,
                "propagate": False,
            },
            "uvicorn.access": {
                "handlers": ["default", "file"],
                "level": settings.log_level,
                "propagate": False,
            },
            "httpx": {
                "handlers": ["file"],
                "level": "WARNING",
                "propagate": False,
            },
            "app": {
                "handlers": ["default", "file"],
                "level": settings.log_level,
                "propagate": False,
            },
        },
        "root": {
            "handlers": ["default", "file"],
            "level": settings.log_level,
        },
    }
    logging.config.dictConfig(logging_config)


logger = logging.getLogger("app")


def set_request_id(request_id: Optional[str]) -> None:
    _request_id_ctx.set(request_id)


def get_request_id() -> Optional[str]:
    return _request_id_ctx.get()
