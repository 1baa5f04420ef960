"""Bridge boundary — one operation per filesystem callback.

A userspace filesystem bridge receives calls from the kernel (getattr,
mkdir, read, ...) and needs a plain answer for each: a payload on
success, or an errno on failure.  This module is that seam:

1. ``FsOp`` — every callback the engine serves.
2. ``OpResult`` — the outcome of one call.  ``status`` follows the
   callback convention: ``0`` on success, ``-errno`` on failure.
3. ``dispatch()`` — routes an ``FsOp`` and its keyword arguments to the
   engine, converting any ``FsError`` into a failed ``OpResult``.
4. ``Operations`` — a facade with one method per callback, for bridges
   that prefer method calls over a dispatch table.

``InvariantError`` is never converted: a corrupted table should stop
the bridge, not look like an ordinary ``ENOENT``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from py_memfs.errors import FsError
from py_memfs.filesystem import FileSystem
from py_memfs.logging import Logger, LogLevel

_SOURCE = "ops"


class FsOp(StrEnum):
    """Every callback the engine answers."""

    GETATTR = "getattr"
    LINK = "link"
    MKDIR = "mkdir"
    MKNOD = "mknod"
    OPEN = "open"
    READ = "read"
    READDIR = "readdir"
    READLINK = "readlink"
    RMDIR = "rmdir"
    SYMLINK = "symlink"
    TRUNCATE = "truncate"
    UNLINK = "unlink"
    UTIMENS = "utimens"
    WRITE = "write"


@dataclass(frozen=True)
class OpResult:
    """The outcome of one dispatched operation."""

    op: FsOp
    value: Any = None
    error: FsError | None = None

    @property
    def ok(self) -> bool:
        """Return True if the operation succeeded."""
        return self.error is None

    @property
    def errno(self) -> int:
        """Return the positive errno of the failure, or 0 on success."""
        return 0 if self.error is None else self.error.errno

    @property
    def status(self) -> int:
        """Return the callback status: ``0`` or ``-errno``."""
        return -self.errno

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly summary of the result."""
        return {
            "op": self.op.value,
            "ok": self.ok,
            "value": self.value,
            "errno": self.errno,
            "error": None if self.error is None else str(self.error),
        }


# -- Handlers -------------------------------------------------------------------


def _op_getattr(fs: FileSystem, **kwargs: Any) -> dict[str, int]:
    """Return stat-style attributes."""
    return fs.getattr(kwargs["path"]).to_stat()


def _op_link(fs: FileSystem, **kwargs: Any) -> int:
    """Create a hard link."""
    return fs.hard_link(kwargs["target"], kwargs["link_path"])


def _op_mkdir(fs: FileSystem, **kwargs: Any) -> int:
    """Create a directory; the requested mode is ignored."""
    return fs.create_directory(kwargs["path"])


def _op_mknod(fs: FileSystem, **kwargs: Any) -> int:
    """Create a regular file; mode and device are ignored."""
    return fs.create_regular(kwargs["path"])


def _op_open(fs: FileSystem, **kwargs: Any) -> int:
    """Check the path exists."""
    return fs.open(kwargs["path"])


def _op_read(fs: FileSystem, **kwargs: Any) -> bytes:
    """Read a byte range."""
    return fs.read(kwargs["path"], kwargs.get("offset", 0), kwargs["size"])


def _op_readdir(fs: FileSystem, **kwargs: Any) -> list[str]:
    """List entry names in storage order, ``.`` and ``..`` included."""
    return [record.name for record in fs.list_dir(kwargs["path"])]


def _op_readlink(fs: FileSystem, **kwargs: Any) -> str:
    """Return a symlink target."""
    return fs.readlink(kwargs["path"])


def _op_rmdir(fs: FileSystem, **kwargs: Any) -> None:
    """Remove an empty directory."""
    fs.remove_directory(kwargs["path"])


def _op_symlink(fs: FileSystem, **kwargs: Any) -> int:
    """Create a symbolic link."""
    return fs.create_symlink(kwargs["target"], kwargs["link_path"])


def _op_truncate(fs: FileSystem, **kwargs: Any) -> None:
    """Resize a file."""
    fs.truncate(kwargs["path"], kwargs["length"])


def _op_unlink(fs: FileSystem, **kwargs: Any) -> None:
    """Remove a name."""
    fs.unlink(kwargs["path"])


def _op_utimens(fs: FileSystem, **kwargs: Any) -> None:
    """Accept and discard a timestamp update."""
    fs.utimens(kwargs["path"], kwargs.get("times"))


def _op_write(fs: FileSystem, **kwargs: Any) -> int:
    """Write a byte range."""
    return fs.write(kwargs["path"], kwargs.get("offset", 0), kwargs["data"])


_HANDLERS: dict[FsOp, Any] = {
    FsOp.GETATTR: _op_getattr,
    FsOp.LINK: _op_link,
    FsOp.MKDIR: _op_mkdir,
    FsOp.MKNOD: _op_mknod,
    FsOp.OPEN: _op_open,
    FsOp.READ: _op_read,
    FsOp.READDIR: _op_readdir,
    FsOp.READLINK: _op_readlink,
    FsOp.RMDIR: _op_rmdir,
    FsOp.SYMLINK: _op_symlink,
    FsOp.TRUNCATE: _op_truncate,
    FsOp.UNLINK: _op_unlink,
    FsOp.UTIMENS: _op_utimens,
    FsOp.WRITE: _op_write,
}


def dispatch(
    fs: FileSystem,
    op: FsOp | str,
    *,
    logger: Logger | None = None,
    **kwargs: Any,
) -> OpResult:
    """Run one operation against *fs* and return its result.

    Args:
        fs: The filesystem to operate on.
        op: The operation, as an ``FsOp`` or its string value.
        logger: If given, receives a DEBUG entry per call and a WARNING
            entry per failure.
        **kwargs: Arguments specific to the operation.

    Raises:
        ValueError: If *op* is not a known operation.
        KeyError: If a required argument is missing.

    """
    op = FsOp(op)
    handler = _HANDLERS[op]
    if logger is not None:
        logger.log(LogLevel.DEBUG, _describe(kwargs), source=_SOURCE, op=op.value)
    try:
        value = handler(fs, **kwargs)
    except FsError as e:
        if logger is not None:
            logger.log(LogLevel.WARNING, f"{e} (errno {e.errno})", source=_SOURCE, op=op.value)
        return OpResult(op=op, error=e)
    return OpResult(op=op, value=value)


def _describe(kwargs: dict[str, Any]) -> str:
    parts = []
    for key, value in kwargs.items():
        if isinstance(value, bytes | bytearray):
            parts.append(f"{key}=<{len(value)} bytes>")
        else:
            parts.append(f"{key}={value!r}")
    return ", ".join(parts)


class Operations:
    """Callback-per-method facade over ``dispatch()``.

    Each method mirrors one bridge callback and returns an ``OpResult``.
    """

    def __init__(self, fs: FileSystem | None = None, *, logger: Logger | None = None) -> None:
        """Serve *fs* (a fresh filesystem by default), logging to *logger*."""
        self.fs = fs if fs is not None else FileSystem()
        self.logger = logger if logger is not None else Logger()

    def _call(self, op: FsOp, **kwargs: Any) -> OpResult:
        return dispatch(self.fs, op, logger=self.logger, **kwargs)

    def getattr(self, path: str) -> OpResult:
        """Return attributes of *path*."""
        return self._call(FsOp.GETATTR, path=path)

    def link(self, target: str, link_path: str) -> OpResult:
        """Hard-link *link_path* to the existing *target*."""
        return self._call(FsOp.LINK, target=target, link_path=link_path)

    def mkdir(self, path: str, mode: int = 0o777) -> OpResult:
        """Create a directory (mode bits are fixed)."""
        del mode
        return self._call(FsOp.MKDIR, path=path)

    def mknod(self, path: str, mode: int = 0o776, dev: int = 0) -> OpResult:
        """Create a regular file (mode bits are fixed)."""
        del mode, dev
        return self._call(FsOp.MKNOD, path=path)

    def open(self, path: str, flags: int = 0) -> OpResult:
        """Open *path*; only existence is checked."""
        del flags
        return self._call(FsOp.OPEN, path=path)

    def read(self, path: str, size: int, offset: int = 0) -> OpResult:
        """Read *size* bytes at *offset*."""
        return self._call(FsOp.READ, path=path, size=size, offset=offset)

    def readdir(self, path: str) -> OpResult:
        """List the entries of a directory."""
        return self._call(FsOp.READDIR, path=path)

    def readlink(self, path: str) -> OpResult:
        """Return the target of a symlink."""
        return self._call(FsOp.READLINK, path=path)

    def rmdir(self, path: str) -> OpResult:
        """Remove an empty directory."""
        return self._call(FsOp.RMDIR, path=path)

    def symlink(self, target: str, link_path: str) -> OpResult:
        """Create *link_path* pointing at *target*."""
        return self._call(FsOp.SYMLINK, target=target, link_path=link_path)

    def truncate(self, path: str, length: int) -> OpResult:
        """Resize a file."""
        return self._call(FsOp.TRUNCATE, path=path, length=length)

    def unlink(self, path: str) -> OpResult:
        """Remove a non-directory name."""
        return self._call(FsOp.UNLINK, path=path)

    def utimens(self, path: str, times: tuple[float, float] | None = None) -> OpResult:
        """Accept and discard new timestamps."""
        return self._call(FsOp.UTIMENS, path=path, times=times)

    def write(self, path: str, data: bytes, offset: int = 0) -> OpResult:
        """Write *data* at *offset*."""
        return self._call(FsOp.WRITE, path=path, data=data, offset=offset)
