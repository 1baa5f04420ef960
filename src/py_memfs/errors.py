"""Filesystem error taxonomy.

Every user-facing failure is an ``FsError`` subclass carrying the errno
the bridge should report.  The engine raises them; the operation
dispatcher (``py_memfs.operations``) catches them and turns them into
result values, so nothing above the dispatcher ever sees a traceback
for an ordinary "no such file" condition.

``InvariantError`` is deliberately *not* an ``FsError``: it means the
inode table itself is inconsistent, which is a programming error and
must not be reported as a routine errno.
"""

from errno import (
    EBUSY,
    EEXIST,
    EFBIG,
    EINVAL,
    EIO,
    EISDIR,
    ENAMETOOLONG,
    ENOENT,
    ENOTDIR,
    ENOTEMPTY,
    EPERM,
)


class FsError(Exception):
    """Base class for recoverable filesystem failures."""

    errno: int = EIO


class NotFoundError(FsError):
    """The path does not name an existing node."""

    errno = ENOENT


class NotADirectoryFsError(FsError):
    """A directory was required but something else was found."""

    errno = ENOTDIR


class NotAFileError(FsError):
    """File content was accessed on a node that is not a regular file."""

    errno = EINVAL


class IsADirectoryFsError(NotAFileError):
    """A non-directory was required but a directory was found."""

    errno = EISDIR


class NotASymlinkError(FsError):
    """A link target was requested from a node that is not a symlink."""

    errno = EINVAL


class DirectoryNotEmptyError(FsError):
    """The directory holds entries besides ``.`` and ``..``."""

    errno = ENOTEMPTY


class CapacityExceededError(FsError):
    """A file, symlink, or directory would outgrow its fixed block limit."""

    errno = EFBIG

    def __init__(self, message: str, *, code: int = EFBIG) -> None:
        """Create the error, optionally overriding the reported errno."""
        super().__init__(message)
        self.errno = code


class NameTooLongError(FsError):
    """An entry name does not fit in a directory record."""

    errno = ENAMETOOLONG


class AlreadyExistsError(FsError):
    """The target name is already taken in its parent directory."""

    errno = EEXIST


class NotPermittedError(FsError):
    """The operation is never allowed on this kind of node."""

    errno = EPERM


class BusyError(FsError):
    """The node is in use by the filesystem itself (the root)."""

    errno = EBUSY


class InvalidArgumentError(FsError):
    """An offset or length is out of range."""

    errno = EINVAL


class InvariantError(RuntimeError):
    """Internal tables are inconsistent; this is a bug, not a user error."""
