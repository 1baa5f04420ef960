"""Tests for the bridge boundary — dispatch, result values, and errno codes."""

import errno
import os
import stat

import pytest

from py_memfs.errors import DirectoryNotEmptyError, NotFoundError
from py_memfs.filesystem import FileSystem
from py_memfs.logging import Logger, LogLevel
from py_memfs.operations import FsOp, OpResult, Operations, dispatch


class TestFsOp:
    """Verify the operation catalogue."""

    def test_fourteen_operations(self) -> None:
        """Every bridge callback has an FsOp member."""
        expected = 14
        assert len(FsOp) == expected

    def test_string_values(self) -> None:
        """Members compare equal to their callback names."""
        assert FsOp.GETATTR == "getattr"
        assert FsOp.UTIMENS == "utimens"


class TestDispatch:
    """Verify dispatch() turns FsError into result values."""

    def test_success_carries_value(self) -> None:
        """A successful call returns ok=True and its payload."""
        fs = FileSystem()
        result = dispatch(fs, FsOp.MKDIR, path="/a")
        assert result.ok
        assert result.status == 0
        assert result.value == fs.resolve("/a").ino

    def test_failure_carries_errno(self) -> None:
        """A failing call returns the error and -errno status."""
        fs = FileSystem()
        result = dispatch(fs, FsOp.GETATTR, path="/ghost")
        assert not result.ok
        assert isinstance(result.error, NotFoundError)
        assert result.errno == errno.ENOENT
        assert result.status == -errno.ENOENT

    def test_unencodable_name_is_a_result(self) -> None:
        """A name that cannot be stored fails as EINVAL, not an exception."""
        fs = FileSystem()
        result = dispatch(fs, FsOp.MKNOD, path="/bad\ud800")
        assert not result.ok
        assert result.status == -errno.EINVAL

    def test_undecodable_name_is_created(self) -> None:
        """Names from os.fsdecode are accepted through the dispatcher."""
        fs = FileSystem()
        path = os.fsdecode(b"/caf\xe9")
        assert dispatch(fs, FsOp.MKNOD, path=path).ok
        assert dispatch(fs, FsOp.READDIR, path="/").value == [".", "..", path[1:]]

    def test_string_op_is_accepted(self) -> None:
        """Operations may be named by string."""
        fs = FileSystem()
        assert dispatch(fs, "mknod", path="/f").ok

    def test_unknown_op_raises(self) -> None:
        """An unknown operation name is a programming error."""
        with pytest.raises(ValueError, match="bogus"):
            dispatch(FileSystem(), "bogus", path="/")

    def test_missing_argument_raises(self) -> None:
        """Required arguments are not optional."""
        with pytest.raises(KeyError):
            dispatch(FileSystem(), FsOp.GETATTR)

    def test_logger_records_calls_and_failures(self) -> None:
        """Every call is logged at DEBUG, failures at WARNING."""
        fs = FileSystem()
        logger = Logger()
        dispatch(fs, FsOp.MKNOD, logger=logger, path="/f")
        dispatch(fs, FsOp.RMDIR, logger=logger, path="/f")
        expected_entries = 3
        assert len(logger) == expected_entries
        assert len(logger.filter(op="mknod")) == 1
        warnings = logger.filter(min_level=LogLevel.WARNING)
        assert len(warnings) == 1
        assert warnings[0].op == "rmdir"
        assert "errno" in warnings[0].message

    def test_bytes_are_summarised_in_log(self) -> None:
        """Write payloads are logged by length, not content."""
        fs = FileSystem()
        fs.create_regular("/f")
        logger = Logger()
        dispatch(fs, FsOp.WRITE, logger=logger, path="/f", data=b"secret", offset=0)
        assert "<6 bytes>" in logger.entries[0].message
        assert "secret" not in logger.entries[0].message


class TestOpResult:
    """Verify result rendering."""

    def test_to_dict_success(self) -> None:
        """Successful results render with errno 0."""
        result = OpResult(op=FsOp.OPEN, value=3)
        assert result.to_dict() == {
            "op": "open",
            "ok": True,
            "value": 3,
            "errno": 0,
            "error": None,
        }

    def test_to_dict_failure(self) -> None:
        """Failed results render the message and errno."""
        result = OpResult(op=FsOp.RMDIR, error=DirectoryNotEmptyError("Directory not empty: /a"))
        data = result.to_dict()
        assert data["ok"] is False
        assert data["errno"] == errno.ENOTEMPTY
        assert data["error"] == "Directory not empty: /a"


class TestOperationsFacade:
    """Verify one method per callback."""

    def test_getattr_reports_stat_fields(self) -> None:
        """getattr returns st_* fields with the fixed modes."""
        ops = Operations()
        ops.mknod("/f")
        ops.write("/f", b"hello")
        attrs = ops.getattr("/f").value
        assert stat.S_ISREG(attrs["st_mode"])
        assert stat.S_IMODE(attrs["st_mode"]) == 0o776
        assert attrs["st_size"] == len(b"hello")
        assert attrs["st_nlink"] == 1

    def test_directory_mode(self) -> None:
        """Directories report S_IFDIR | 0777."""
        ops = Operations()
        ops.mkdir("/d", 0o700)
        attrs = ops.getattr("/d").value
        assert stat.S_ISDIR(attrs["st_mode"])
        assert stat.S_IMODE(attrs["st_mode"]) == 0o777

    def test_readdir_names(self) -> None:
        """readdir lists names in storage order."""
        ops = Operations()
        ops.mkdir("/a")
        ops.mknod("/a/b.txt")
        assert ops.readdir("/a").value == [".", "..", "b.txt"]

    def test_read_write_round_trip(self) -> None:
        """write then read returns the same bytes."""
        ops = Operations()
        ops.mknod("/f")
        assert ops.write("/f", b"abc", 10).value == len(b"abc")
        assert ops.read("/f", 3, 10).value == b"abc"

    def test_symlink_and_readlink(self) -> None:
        """readlink returns the stored target."""
        ops = Operations()
        ops.symlink("/a/b.txt", "/link")
        assert ops.readlink("/link").value == "/a/b.txt"
        attrs = ops.getattr("/link").value
        assert stat.S_ISLNK(attrs["st_mode"])

    def test_link_unlink_rmdir(self) -> None:
        """Link lifecycle through the facade."""
        ops = Operations()
        ops.mkdir("/d")
        ops.mknod("/d/f")
        ops.link("/d/f", "/g")
        assert ops.rmdir("/d").errno == errno.ENOTEMPTY
        assert ops.unlink("/d/f").ok
        assert ops.rmdir("/d").ok
        assert ops.getattr("/g").value["st_nlink"] == 1

    def test_truncate_open_utimens(self) -> None:
        """The remaining callbacks succeed on an existing file."""
        ops = Operations()
        ops.mknod("/f")
        assert ops.open("/f").ok
        assert ops.truncate("/f", 10).ok
        assert ops.utimens("/f", (0.0, 0.0)).ok
        assert ops.getattr("/f").value["st_size"] == 10  # noqa: PLR2004

    def test_capacity_error_is_efbig(self) -> None:
        """Writing past the limit reports EFBIG."""
        ops = Operations()
        ops.mknod("/f")
        result = ops.write("/f", b"x", ops.fs.geometry.max_file_size)
        assert result.errno == errno.EFBIG

    def test_open_missing_is_enoent(self) -> None:
        """Missing paths report ENOENT."""
        assert Operations().open("/nope").status == -errno.ENOENT

    def test_facade_logs_to_its_logger(self) -> None:
        """The facade shares one logger across calls."""
        ops = Operations()
        ops.mknod("/f")
        ops.getattr("/f")
        assert [e.op for e in ops.logger.entries] == ["mknod", "getattr"]
