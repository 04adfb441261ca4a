from __future__ import annotations

import logging

import pytest

from utils.logger import _MaskingFilter, mask_iban, mask_text, resolve_level, setup_logger


def test_mask_iban():
    assert mask_iban("DE89370400440532013000") == "DE89**************3000"
    assert mask_iban("DE89") == "DE89"


def test_mask_text_masks_embedded_ibans():
    text = "IBAN rejected: DE89370400440532013000 (ok), GB82WEST12345698765432"
    assert mask_text(text) == (
        "IBAN rejected: DE89**************3000 (ok), GB82**************5432"
    )
    assert mask_text("no account here") == "no account here"


def test_masking_filter_masks_args():
    record = logging.LogRecord(
        "ibanMCP", logging.DEBUG, __file__, 1, "IBAN %s: %d", ("DE89370400440532013000", 2), None
    )
    assert _MaskingFilter().filter(record)
    assert record.getMessage() == "IBAN DE89**************3000: 2"


@pytest.mark.parametrize(
    "name, level",
    [("debug", logging.DEBUG), (" WARNING ", logging.WARNING), ("verbose", None), ("", None)],
)
def test_resolve_level(name, level):
    assert resolve_level(name) == level


def test_unknown_level_falls_back_to_info(monkeypatch, tmp_path, caplog):
    monkeypatch.setenv("IBAN_MCP_LOG_LEVEL", "verbose")
    monkeypatch.setenv("IBAN_MCP_LOG_DIR", str(tmp_path))
    logger = setup_logger("ibanMCP.test_unknown_level")
    try:
        console = logger.handlers[0]
        assert isinstance(console, logging.StreamHandler)
        assert console.level == logging.INFO
        assert "Unknown IBAN_MCP_LOG_LEVEL 'verbose', using INFO" in caplog.text
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
