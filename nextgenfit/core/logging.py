"""
Logging configuration.

Text logs by default, JSON lines when LOG_FORMAT=json.
"""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from nextgenfit.core.config import LOG_FORMAT, LOG_LEVEL


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, ensure_ascii=False)


def setup_logging(level: str = LOG_LEVEL, fmt: str = LOG_FORMAT) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)

    if fmt == "json":
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # 외부 라이브러리 로그는 조용히
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("databases").setLevel(logging.WARNING)
