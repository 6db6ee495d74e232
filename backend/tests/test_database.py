"""
Tests for quiz store query timing.
"""

import logging

import pytest
from sqlalchemy import text

from medgloss import database


class TestQueryTiming:

    @pytest.mark.unit
    def test_slow_query_logged(self, db, caplog, monkeypatch):
        monkeypatch.setattr(database, "SLOW_QUERY_THRESHOLD_MS", -1)
        with caplog.at_level(logging.WARNING, logger="medgloss.database.queries"):
            db.execute(text("SELECT 1"))

        assert any("Slow quiz store query" in r.message for r in caplog.records)

    @pytest.mark.unit
    def test_fast_query_only_at_debug(self, db, caplog, monkeypatch):
        monkeypatch.setattr(database, "SLOW_QUERY_THRESHOLD_MS", 10 ** 6)
        with caplog.at_level(logging.DEBUG, logger="medgloss.database.queries"):
            db.execute(text("SELECT 1"))

        messages = [r for r in caplog.records if r.name == "medgloss.database.queries"]
        assert messages
        assert all(r.levelno == logging.DEBUG for r in messages)
