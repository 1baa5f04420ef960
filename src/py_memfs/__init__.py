"""py-memfs — an in-memory inode filesystem engine for userspace bridges.

Re-exports public symbols so callers can write::

    from py_memfs import FileSystem, Operations
"""

from py_memfs.config import DEFAULT_GEOMETRY, Geometry
from py_memfs.directory import DirRecord
from py_memfs.errors import (
    AlreadyExistsError,
    BusyError,
    CapacityExceededError,
    DirectoryNotEmptyError,
    FsError,
    InvalidArgumentError,
    InvariantError,
    IsADirectoryFsError,
    NameTooLongError,
    NotADirectoryFsError,
    NotAFileError,
    NotASymlinkError,
    NotFoundError,
    NotPermittedError,
)
from py_memfs.filesystem import FileSystem
from py_memfs.inode import InodeInfo, InodeKind
from py_memfs.logging import Logger, LogLevel
from py_memfs.operations import FsOp, OpResult, Operations, dispatch

__all__ = [
    "DEFAULT_GEOMETRY",
    "AlreadyExistsError",
    "BusyError",
    "CapacityExceededError",
    "DirRecord",
    "DirectoryNotEmptyError",
    "FileSystem",
    "FsError",
    "FsOp",
    "Geometry",
    "InodeInfo",
    "InodeKind",
    "InvalidArgumentError",
    "InvariantError",
    "IsADirectoryFsError",
    "LogLevel",
    "Logger",
    "NameTooLongError",
    "NotADirectoryFsError",
    "NotAFileError",
    "NotASymlinkError",
    "NotFoundError",
    "NotPermittedError",
    "OpResult",
    "Operations",
    "dispatch",
]
