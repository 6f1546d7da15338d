# tests/test_config.py

import logging

import pytest

from dbqueue.backend.app import config
from dbqueue.backend.app.logging_config import LOGGER_NAME, configure_logging


def test_database_url_is_required(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with pytest.raises(RuntimeError, match="DATABASE_URL"):
        config.get_database_url()


def test_database_url_from_environment(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///queue.db")
    assert config.get_database_url() == "sqlite:///queue.db"


@pytest.mark.parametrize("value,expected", [("1", True), ("TRUE", True), ("no", False), ("", False)])
def test_sql_echo_flag(monkeypatch, value, expected):
    monkeypatch.setenv("SQL_ECHO", value)
    assert config.sql_echo() is expected


def test_defaults(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("MAX_CLAIM_COUNT", raising=False)
    assert config.log_level() == "INFO"
    assert config.max_claim_count() == 100


def test_configure_logging_adds_one_handler():
    logger = configure_logging("DEBUG")
    configure_logging("DEBUG")
    ours = [h for h in logger.handlers if getattr(h, "_dbqueue", False)]
    assert logger.name == LOGGER_NAME
    assert len(ours) == 1
    assert logger.level == logging.DEBUG
