"""Tests for JsonAuditSink."""

import asyncio
import json
from datetime import timedelta
from pathlib import Path

import pytest

from factories import NOW
from trade_admission.config.settings import AuditSettings
from trade_admission.stores.audit_log import JsonAuditSink
from trade_admission.validation.models import AuditRecord


class TestJsonAuditSink:
    """Tests for JsonAuditSink."""

    @pytest.fixture
    def data_dir(self, tmp_path: Path) -> Path:
        return tmp_path / "audit"

    @pytest.fixture
    def sink(self, data_dir: Path) -> JsonAuditSink:
        return JsonAuditSink(AuditSettings(data_dir=str(data_dir)))

    def make_record(self, account_id: str = "acc_1", **result) -> AuditRecord:
        return AuditRecord(
            account_id=account_id,
            request={"symbol": "EURUSD", "direction": "long", "requested_risk_pct": 1.0},
            result={"allowed": True, "adjusted_lot_size": 2.0, "news_window": None, **result},
            timestamp=NOW,
        )

    def test_creates_data_dir(self, sink: JsonAuditSink, data_dir: Path) -> None:
        assert data_dir.is_dir()

    @pytest.mark.asyncio
    async def test_record_written_as_json_line(self, sink: JsonAuditSink, data_dir: Path) -> None:
        """Each record is one JSON line in the file for its date."""
        await sink.record(self.make_record())

        lines = (data_dir / "2026-01-14.jsonl").read_text().splitlines()
        data = json.loads(lines[0])

        assert len(lines) == 1
        assert data["account_id"] == "acc_1"
        assert data["timestamp"] == "2026-01-14T12:00:00+00:00"
        assert data["allowed"] is True
        assert data["news_blocked"] is False
        assert data["result"]["adjusted_lot_size"] == 2.0

    @pytest.mark.asyncio
    async def test_news_blocked_flag(self, sink: JsonAuditSink, data_dir: Path) -> None:
        record = self.make_record(
            allowed=False, news_window={"event": "CPI", "time": "2026-01-14T12:10:00+00:00"}
        )

        await sink.record(record)

        data = json.loads((data_dir / "2026-01-14.jsonl").read_text())
        assert data["news_blocked"] is True

    @pytest.mark.asyncio
    async def test_requested_and_adjusted_lots_recorded(
        self, sink: JsonAuditSink, data_dir: Path
    ) -> None:
        """The sized lot is kept next to the lot the rules allowed."""
        await sink.record(self.make_record(requested_lot_size=2.0, adjusted_lot_size=1.5))

        data = json.loads((data_dir / "2026-01-14.jsonl").read_text())
        assert data["requested_lot_size"] == 2.0
        assert data["adjusted_lot_size"] == 1.5

    @pytest.mark.asyncio
    async def test_concurrent_appends_not_lost(self, sink: JsonAuditSink) -> None:
        """Concurrent writers each get their own line."""
        await asyncio.gather(*(sink.record(self.make_record(f"acc_{i}")) for i in range(20)))

        records = await sink.get_records_for_date(NOW.date())

        assert sorted(r.account_id for r in records) == sorted(f"acc_{i}" for i in range(20))

    @pytest.mark.asyncio
    async def test_read_back(self, sink: JsonAuditSink) -> None:
        """Records read back equal the records written."""
        record = self.make_record()
        await sink.record(record)

        assert await sink.get_records_for_date(NOW.date()) == [record]

    @pytest.mark.asyncio
    async def test_no_records_for_other_day(self, sink: JsonAuditSink) -> None:
        await sink.record(self.make_record())

        assert await sink.get_records_for_date((NOW + timedelta(days=1)).date()) == []
