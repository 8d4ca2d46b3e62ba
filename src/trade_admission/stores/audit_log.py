# src/trade_admission/stores/audit_log.py
"""Audit sink persisting validation decisions to JSON-lines files."""
import asyncio
import json
from datetime import date, datetime
from pathlib import Path

import aiofiles

from trade_admission.config.settings import AuditSettings
from trade_admission.stores.base import AuditSink
from trade_admission.validation.models import AuditRecord


class JsonAuditSink(AuditSink):
    """Appends audit records to daily JSON-lines files.

    Stores records in files with format: {data_dir}/{YYYY-MM-DD}.jsonl,
    one record per line. Records are never rewritten.
    """

    def __init__(self, settings: AuditSettings) -> None:
        """Initialize the audit sink.

        Args:
            settings: Audit configuration settings.
        """
        self._settings = settings
        self._data_dir = Path(settings.data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._write_lock = asyncio.Lock()

    def _get_file_path(self, record_date: date) -> Path:
        """Get the JSON-lines file path for a specific date."""
        return self._data_dir / f"{record_date.isoformat()}.jsonl"

    def _record_to_dict(self, record: AuditRecord) -> dict:
        """Convert an AuditRecord to a dictionary for JSON storage."""
        return {
            "account_id": record.account_id,
            "timestamp": record.timestamp.isoformat(),
            "allowed": record.result.get("allowed", False),
            "requested_lot_size": record.result.get("requested_lot_size"),
            "adjusted_lot_size": record.result.get("adjusted_lot_size"),
            "news_blocked": record.result.get("news_window") is not None,
            "request": record.request,
            "result": record.result,
        }

    def _dict_to_record(self, data: dict) -> AuditRecord:
        """Convert a dictionary from JSON to an AuditRecord."""
        return AuditRecord(
            account_id=data["account_id"],
            request=data["request"],
            result=data["result"],
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )

    async def record(self, record: AuditRecord) -> None:
        """Append an audit record to the file for its date.

        Args:
            record: The decision to persist.
        """
        line = json.dumps(self._record_to_dict(record), default=str)
        file_path = self._get_file_path(record.timestamp.date())
        async with self._write_lock:
            async with aiofiles.open(file_path, "a") as f:
                await f.write(line + "\n")

    async def get_records_for_date(self, query_date: date) -> list[AuditRecord]:
        """Get all audit records for a specific date.

        Args:
            query_date: The date to retrieve records for.

        Returns:
            List of AuditRecord objects for that date, oldest first.
        """
        file_path = self._get_file_path(query_date)
        if not file_path.exists():
            return []

        async with aiofiles.open(file_path, "r") as f:
            content = await f.read()

        return [self._dict_to_record(json.loads(line)) for line in content.splitlines() if line]
