"""Tests for the operation log — a bounded structured ring buffer."""

import pytest

from py_memfs.logging import LogEntry, Logger, LogLevel


class TestLogLevel:
    """Verify level ordering."""

    def test_levels_are_ordered(self) -> None:
        """DEBUG < INFO < WARNING < ERROR."""
        assert LogLevel.DEBUG < LogLevel.INFO < LogLevel.WARNING < LogLevel.ERROR


class TestLogEntry:
    """Verify entry formatting and immutability."""

    def test_str_with_op(self) -> None:
        """Entries render as [LEVEL] source(op): message."""
        entry = LogEntry(level=LogLevel.WARNING, message="boom", source="ops", op="rmdir")
        assert str(entry) == "[WARNING] ops(rmdir): boom"

    def test_str_without_op(self) -> None:
        """The op part is omitted when absent."""
        entry = LogEntry(level=LogLevel.INFO, message="mounted", source="fs")
        assert str(entry) == "[INFO] fs: mounted"

    def test_entry_is_frozen(self) -> None:
        """Log records cannot be edited after the fact."""
        entry = LogEntry(level=LogLevel.INFO, message="m", source="s")
        with pytest.raises(AttributeError):
            entry.message = "changed"  # type: ignore[misc]


class TestLogger:
    """Verify appending, filtering, eviction, and clearing."""

    def test_entries_in_order(self) -> None:
        """Entries come back oldest first."""
        logger = Logger()
        logger.log(LogLevel.INFO, "one", source="ops")
        logger.log(LogLevel.INFO, "two", source="ops")
        assert [e.message for e in logger.entries] == ["one", "two"]

    def test_filter_by_level(self) -> None:
        """min_level keeps entries at or above it."""
        logger = Logger()
        logger.log(LogLevel.DEBUG, "d", source="ops")
        logger.log(LogLevel.ERROR, "e", source="ops")
        assert [e.message for e in logger.filter(min_level=LogLevel.WARNING)] == ["e"]

    def test_filter_by_source_and_op(self) -> None:
        """source and op filters combine."""
        logger = Logger()
        logger.log(LogLevel.INFO, "a", source="ops", op="read")
        logger.log(LogLevel.INFO, "b", source="ops", op="write")
        logger.log(LogLevel.INFO, "c", source="web", op="read")
        assert [e.message for e in logger.filter(source="ops", op="read")] == ["a"]

    def test_capacity_evicts_oldest(self) -> None:
        """A full logger forgets its oldest entries."""
        logger = Logger(capacity=2)
        for message in ["a", "b", "c"]:
            logger.log(LogLevel.INFO, message, source="ops")
        assert [e.message for e in logger.entries] == ["b", "c"]

    def test_unbounded_logger(self) -> None:
        """capacity=None keeps everything."""
        logger = Logger(capacity=None)
        for i in range(2000):
            logger.log(LogLevel.DEBUG, str(i), source="ops")
        expected = 2000
        assert len(logger) == expected

    def test_clear(self) -> None:
        """clear() empties the buffer."""
        logger = Logger()
        logger.log(LogLevel.INFO, "x", source="ops")
        logger.clear()
        assert logger.entries == []
