"""Logging setup for the portal.

Streamlit re-executes the entry script on every interaction, so
configure_logging replaces the root handlers instead of stacking new ones.
"""

from __future__ import annotations

import json
import logging
import sys

from config import LoggingConfig

_HANDLER_NAME = "derby-portal"


class JSONFormatter(logging.Formatter):
    def format(self, record):
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "func": record.funcName,
            "lineno": record.lineno,
        }
        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(log_record)


def configure_logging(cfg: LoggingConfig) -> logging.Handler:
    level = getattr(logging, cfg.level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setLevel(level)
    if cfg.json:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [h for h in root_logger.handlers if h.get_name() != _HANDLER_NAME]
    root_logger.addHandler(handler)

    # httpx logs every Supabase request at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
    return handler
