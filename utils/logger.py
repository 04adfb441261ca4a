"""Centralized logging with IBAN masking."""

from __future__ import annotations

import logging
import os
import re
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

_IBAN_PATTERN = re.compile(r"\b([A-Z]{2}\d{2})[\dA-Z]{4,}([\dA-Z]{4})\b")

DEFAULT_LOG_DIR = Path.home() / ".ibanMCP" / "logs"


class _MaskingFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = mask_text(str(record.msg))
        if record.args:
            if isinstance(record.args, dict):
                record.args = {k: (mask_text(v) if isinstance(v, str) else v) for k, v in record.args.items()}
            else:
                record.args = tuple((mask_text(a) if isinstance(a, str) else a) for a in record.args)
        return True


def mask_iban(iban: str) -> str:
    """Keep the first and last four characters, star out the rest."""
    if len(iban) < 8:
        return iban
    return iban[:4] + "*" * (len(iban) - 8) + iban[-4:]


def mask_text(text: str) -> str:
    return _IBAN_PATTERN.sub(lambda m: mask_iban(m.group(0)), text)


def resolve_level(name: str) -> int | None:
    """Numeric level for a name like "debug", or None if logging does not know it."""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else None


def setup_logger(name: str = "ibanMCP") -> logging.Logger:
    log_dir = Path(os.getenv("IBAN_MCP_LOG_DIR", "").strip() or DEFAULT_LOG_DIR)
    raw_level = os.getenv("IBAN_MCP_LOG_LEVEL", "").strip()
    console_level = resolve_level(raw_level) if raw_level else logging.INFO

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    if logger.handlers:
        return logger

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level if console_level is not None else logging.INFO)
    console.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    console.addFilter(_MaskingFilter())
    logger.addHandler(console)
    if console_level is None:
        logger.warning("Unknown IBAN_MCP_LOG_LEVEL %r, using INFO", raw_level)

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(
            log_dir / "server.log", maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
        )
    except OSError as exc:
        logger.warning("File logging disabled (%s): %s", log_dir, exc)
        return logger

    fh.setLevel(logging.DEBUG)
    fh.setFormatter(
        logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d – %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    fh.addFilter(_MaskingFilter())
    logger.addHandler(fh)
    return logger


logger = setup_logger()
