# financas/core/logging.py
# Log em JSON, uma linha por evento, no stdout (o Render coleta daí).

from __future__ import annotations
import json
import logging
import sys


class JsonFormatter(logging.Formatter):
    """Monta o JSON com json.dumps: aspas e quebras de linha na mensagem ficam escapadas."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "ts": self.formatTime(record),
            "name": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(level: str = "INFO") -> None:
    logger = logging.getLogger()
    logger.handlers.clear()
    logger.setLevel(level.upper())

    h = logging.StreamHandler(sys.stdout)
    h.setFormatter(JsonFormatter())
    logger.addHandler(h)

    # httpx (usado pelo supabase e pelo telegram) loga cada requisição em INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
