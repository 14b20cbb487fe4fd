"""Tests for usage accounting."""

import csv
from concurrent.futures import ThreadPoolExecutor

import pytest
from freezegun import freeze_time

from completion_dispatch.core.exceptions import UsageSinkError
from completion_dispatch.domain.enums import UsageStatus
from completion_dispatch.infrastructure.monitoring import CsvUsageSink, UsageRecord, UsageRecorder
from completion_dispatch.infrastructure.monitoring.usage_recorder import CSV_HEADER


class MemorySink:
    def __init__(self):
        self.rows: list[UsageRecord] = []
        self.cleared = 0

    def write(self, records):
        self.rows.extend(records)

    def clear(self):
        self.cleared += 1
        self.rows.clear()


class FailingSink:
    def write(self, records):
        raise UsageSinkError("disk full")

    def clear(self):
        raise UsageSinkError("disk full")


def read_rows(path):
    with open(path, newline="", encoding="utf-8") as handle:
        return list(csv.reader(handle))


class TestUsageRecorder:
    """Test the bounded buffer."""

    def test_record_and_flush(self):
        sink = MemorySink()
        recorder = UsageRecorder(sink, capacity=10)

        recorder.record("gemini-2.5-flash", "Gemini", UsageStatus.SUCCESS, 0.42, 30, "What is up?")
        recorder.record("g1", "All", UsageStatus.FAILED, prompt="Hello")

        assert recorder.flush() == 2
        assert [row.model for row in sink.rows] == ["gemini-2.5-flash", "g1"]
        assert recorder.pending() == []

    def test_empty_flush_writes_nothing(self):
        sink = MemorySink()

        assert UsageRecorder(sink).flush() == 0
        assert sink.rows == []

    def test_buffer_keeps_newest(self):
        recorder = UsageRecorder(MemorySink(), capacity=3)

        for index in range(5):
            recorder.record(f"m{index}", "Gemini", UsageStatus.SUCCESS)

        assert [entry.model for entry in recorder.pending()] == ["m2", "m3", "m4"]

    def test_prompt_preview_truncated(self):
        recorder = UsageRecorder(MemorySink())

        entry = recorder.record("m", "Gemini", UsageStatus.SUCCESS, prompt="p" * 250)

        assert entry.prompt == "p" * 100

    def test_negative_numbers_clamped(self):
        entry = UsageRecorder(MemorySink()).record("m", "Gemini", UsageStatus.SUCCESS, -1.0, -5)

        assert entry.elapsed_seconds == 0.0
        assert entry.token_count == 0

    def test_invalid_record_dropped_without_raising(self):
        recorder = UsageRecorder(MemorySink())

        assert recorder.record("m", "Gemini", "not-a-status") is None
        assert recorder.pending() == []

    def test_failed_flush_restores_records(self):
        recorder = UsageRecorder(FailingSink(), capacity=5)
        recorder.record("m1", "Gemini", UsageStatus.SUCCESS)
        recorder.record("m2", "Gemini", UsageStatus.SUCCESS)

        with pytest.raises(UsageSinkError):
            recorder.flush()

        assert [entry.model for entry in recorder.pending()] == ["m1", "m2"]

    def test_zero_capacity_rejected(self):
        with pytest.raises(ValueError):
            UsageRecorder(MemorySink(), capacity=0)

    def test_clear_sink(self):
        sink = MemorySink()

        UsageRecorder(sink).clear_sink()

        assert sink.cleared == 1

    def test_threaded_records_all_kept(self):
        """Test concurrent appends from many threads lose nothing below the cap."""
        recorder = UsageRecorder(MemorySink(), capacity=5000)

        def write_batch(worker: int) -> None:
            for index in range(500):
                recorder.record(f"w{worker}-{index}", "Gemini", UsageStatus.SUCCESS)

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(write_batch, range(8)))

        models = [entry.model for entry in recorder.pending()]
        assert len(models) == 4000
        assert len(set(models)) == 4000

    def test_threaded_records_respect_cap(self):
        """Test the cap holds while threads append and flush concurrently."""
        sink = MemorySink()
        recorder = UsageRecorder(sink, capacity=100)

        def write_batch(worker: int) -> None:
            for index in range(250):
                recorder.record(f"w{worker}-{index}", "Gemini", UsageStatus.SUCCESS)
                if index % 50 == 0:
                    recorder.flush()

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(write_batch, range(8)))

        pending = recorder.pending()
        assert len(pending) <= 100
        written = [entry.model for entry in sink.rows] + [entry.model for entry in pending]
        assert len(written) == len(set(written))


class TestCsvUsageSink:
    """Test the CSV file sink."""

    @freeze_time("2026-03-14 09:26:53")
    def test_writes_header_once(self, tmp_path):
        path = tmp_path / "logs" / "usage.csv"
        recorder = UsageRecorder(CsvUsageSink(path))

        recorder.record("gemini-2.5-flash", "Gemini", UsageStatus.SUCCESS, 1.234, 42, "Capital of France?")
        recorder.flush()
        recorder.record("-", "All", UsageStatus.FAILED, prompt="Second")
        recorder.flush()

        rows = read_rows(path)
        assert rows[0] == CSV_HEADER
        assert rows[1] == [
            "2026-03-14T09:26:53+00:00",
            "gemini-2.5-flash",
            "Gemini",
            "success",
            "1.23",
            "42",
            "Capital of France?",
        ]
        assert rows[2][1:4] == ["-", "All", "failed"]
        assert len(rows) == 3

    def test_clear_keeps_header(self, tmp_path):
        path = tmp_path / "usage.csv"
        sink = CsvUsageSink(path)
        sink.write([UsageRecord(model="m", provider="Gemini", status=UsageStatus.SUCCESS)])

        sink.clear()

        assert read_rows(path) == [CSV_HEADER]

    def test_unwritable_path_raises(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        sink = CsvUsageSink(blocker / "usage.csv")

        with pytest.raises(UsageSinkError):
            sink.write([UsageRecord(model="m", provider="Gemini", status=UsageStatus.SUCCESS)])
