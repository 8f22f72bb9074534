"""Tests for audit sinks."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from secrets_bootstrap.core.audit.filters import SecretRedactor
from secrets_bootstrap.core.audit.sinks import (
    AuditSink,
    CompositeAuditSink,
    FileAuditSink,
    LoggingAuditSink,
)
from secrets_bootstrap.core.audit.types import (
    AuditAction,
    AuditEvent,
    AuditStatus,
)
from secrets_bootstrap.core.utils import mask_secret


def _sample_event(
    status: AuditStatus = AuditStatus.SUCCESS,
    metadata: dict[str, str] | None = None,
) -> AuditEvent:
    return AuditEvent(
        action=AuditAction.SECRET_ACCESSED,
        actor="secrets_bootstrap",
        resource="db-abc123",
        status=status,
        timestamp=datetime(2026, 1, 1, tzinfo=timezone.utc),
        metadata=metadata or {},
    )


# ---------------------------------------------------------------------------
# LoggingAuditSink
# ---------------------------------------------------------------------------


class TestLoggingAuditSink:
    @pytest.mark.parametrize(
        ("status", "level"),
        [
            (AuditStatus.SUCCESS, logging.DEBUG),
            (AuditStatus.SKIPPED, logging.DEBUG),
            (AuditStatus.WARNING, logging.INFO),
            (AuditStatus.FAILURE, logging.WARNING),
        ],
    )
    def test_level_follows_status(
        self, caplog: pytest.LogCaptureFixture, status: AuditStatus, level: int
    ) -> None:
        with caplog.at_level(logging.DEBUG, logger="secrets_bootstrap.audit"):
            LoggingAuditSink().emit(_sample_event(status))
        assert caplog.records[0].levelno == level

    def test_message_format(self, caplog: pytest.LogCaptureFixture) -> None:
        event = _sample_event(AuditStatus.FAILURE, {"kind": "not_found", "error": "gone"})
        with caplog.at_level(logging.DEBUG, logger="secrets_bootstrap.audit"):
            LoggingAuditSink().emit(event)
        assert caplog.records[0].getMessage() == "[AUDIT] secret_accessed db-abc123: failure error=gone kind=not_found"
        assert caplog.records[0].audit_event["resource"] == "db-abc123"  # type: ignore[attr-defined]

    def test_sensitive_metadata_masked(self, caplog: pytest.LogCaptureFixture) -> None:
        event = _sample_event(metadata={"api_token": "tok-1234567890"})
        with caplog.at_level(logging.DEBUG, logger="secrets_bootstrap.audit"):
            LoggingAuditSink().emit(event)
        assert "tok-1234567890" not in caplog.text
        assert "api_token=to" in caplog.text

    def test_custom_logger_name(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="custom.audit"):
            LoggingAuditSink(logger_name="custom.audit").emit(_sample_event())
        assert caplog.records[0].name == "custom.audit"

    def test_string_action_in_log(self, caplog: pytest.LogCaptureFixture) -> None:
        event = AuditEvent(action="custom_action", actor="test", resource="res", status=AuditStatus.WARNING)
        with caplog.at_level(logging.INFO, logger="secrets_bootstrap.audit"):
            LoggingAuditSink().emit(event)
        assert "[AUDIT] custom_action res: warning" in caplog.text


# ---------------------------------------------------------------------------
# FileAuditSink
# ---------------------------------------------------------------------------


class TestFileAuditSink:
    def test_writes_jsonl_with_run_id(self, tmp_path: Path) -> None:
        path = tmp_path / "audit.jsonl"
        sink = FileAuditSink(path, run_id="run-1")
        try:
            sink.emit(_sample_event())
            sink.emit(_sample_event(AuditStatus.FAILURE))
        finally:
            sink.close()

        records = [json.loads(line) for line in path.read_text().splitlines()]
        assert [r["run_id"] for r in records] == ["run-1", "run-1"]
        assert records[0]["action"] == "secret_accessed"
        assert records[0]["resource"] == "db-abc123"
        assert records[1]["status"] == "failure"

    def test_generated_run_ids_differ(self, tmp_path: Path) -> None:
        first = FileAuditSink(tmp_path / "a.jsonl")
        second = FileAuditSink(tmp_path / "a.jsonl")
        assert first.run_id
        assert first.run_id != second.run_id

    def test_runs_share_a_file(self, tmp_path: Path) -> None:
        path = tmp_path / "audit.jsonl"
        for run_id in ("run-1", "run-2"):
            sink = FileAuditSink(path, run_id=run_id)
            sink.emit(_sample_event())
            sink.close()

        run_ids = [json.loads(line)["run_id"] for line in path.read_text().splitlines()]
        assert run_ids == ["run-1", "run-2"]

    def test_metadata_redacted(self, tmp_path: Path) -> None:
        path = tmp_path / "audit.jsonl"
        sink = FileAuditSink(path, redactor=SecretRedactor(always_mask={"conn"}))
        try:
            sink.emit(_sample_event(metadata={"conn": "postgres://u:p@db", "entries": "3"}))
        finally:
            sink.close()

        record = json.loads(path.read_text())
        assert record["metadata"] == {"conn": mask_secret("postgres://u:p@db"), "entries": "3"}

    def test_creates_parent_dirs(self, tmp_path: Path) -> None:
        path = tmp_path / "sub" / "dir" / "audit.jsonl"
        sink = FileAuditSink(path)
        try:
            sink.emit(_sample_event())
        finally:
            sink.close()
        assert path.exists()

    def test_not_opened_until_first_emit(self, tmp_path: Path) -> None:
        path = tmp_path / "audit.jsonl"
        FileAuditSink(path).close()
        assert not path.exists()

    def test_close_idempotent(self, tmp_path: Path) -> None:
        sink = FileAuditSink(tmp_path / "audit.jsonl")
        sink.emit(_sample_event())
        sink.close()
        sink.close()


# ---------------------------------------------------------------------------
# CompositeAuditSink
# ---------------------------------------------------------------------------


class TestCompositeAuditSink:
    def test_fans_out_to_all_sinks(self) -> None:
        sink1 = MagicMock(spec=AuditSink)
        sink2 = MagicMock(spec=AuditSink)
        event = _sample_event()

        CompositeAuditSink(sink1, sink2).emit(event)

        sink1.emit.assert_called_once_with(event)
        sink2.emit.assert_called_once_with(event)

    def test_one_failure_does_not_block_others(self, caplog: pytest.LogCaptureFixture) -> None:
        sink1 = MagicMock(spec=AuditSink)
        sink1.emit.side_effect = RuntimeError("boom")
        sink2 = MagicMock(spec=AuditSink)

        with caplog.at_level(logging.WARNING, logger="secrets_bootstrap.core.audit.sinks"):
            CompositeAuditSink(sink1, sink2).emit(_sample_event())

        sink2.emit.assert_called_once()
        assert "failed to emit" in caplog.text

    def test_close_failure_does_not_block_others(self) -> None:
        sink1 = MagicMock(spec=AuditSink)
        sink1.close.side_effect = RuntimeError("boom")
        sink2 = MagicMock(spec=AuditSink)

        CompositeAuditSink(sink1, sink2).close()

        sink1.close.assert_called_once()
        sink2.close.assert_called_once()
