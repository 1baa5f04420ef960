"""In-memory filesystem engine — node operations over the inode table.

The ``FileSystem`` ties the pieces together:

- an ``InodeTable`` whose slot positions are the inode numbers,
- a ``PathResolver`` that walks directory records from the root,
- the directory store (``Directory``) and file operations (``fileops``).

Every public method takes absolute paths, holds one re-entrant lock for
its whole duration (resolve *and* mutate), and raises an ``FsError``
subclass on failure.  The engine never logs; reporting is the job of
the operation dispatcher in ``py_memfs.operations``.

Link counts drive the whole lifecycle.  Each directory record pointing
at an inode is one link, so:

- a regular file or symlink starts at 1 (its parent's record),
- a directory starts at 2 (its parent's record and its own ``.``),
  and every subdirectory adds one more through its ``..``.

An inode is reclaimed exactly when its link count drops to zero.
"""

from __future__ import annotations

import math
import threading
from collections import Counter
from errno import ENAMETOOLONG, ENOSPC
from typing import Any

from py_memfs import fileops
from py_memfs.blocks import BlockList
from py_memfs.config import DEFAULT_GEOMETRY, Geometry
from py_memfs.directory import (
    PARENT_NAME,
    SELF_NAME,
    Directory,
    DirRecord,
    decode_text,
    encode_name,
    encode_text,
)
from py_memfs.errors import (
    AlreadyExistsError,
    BusyError,
    CapacityExceededError,
    DirectoryNotEmptyError,
    InvariantError,
    InvalidArgumentError,
    IsADirectoryFsError,
    NotADirectoryFsError,
    NotASymlinkError,
    NotFoundError,
    NotPermittedError,
)
from py_memfs.inode import (
    DirectoryInode,
    Inode,
    InodeInfo,
    RegularInode,
    SymlinkInode,
)
from py_memfs.inode_table import ROOT_INO, InodeTable
from py_memfs.path import PathResolver, Resolution, split_path


class FileSystem:
    """An in-memory filesystem with a root directory at ``/``.

    Args:
        geometry: Block and record sizes; defaults to 128-byte blocks,
            32 blocks per inode, 32-byte directory records.

    """

    def __init__(self, geometry: Geometry = DEFAULT_GEOMETRY) -> None:
        """Mount a fresh filesystem holding only the root directory."""
        self._geometry = geometry
        self._table = InodeTable()
        self._resolver = PathResolver(self._table, geometry)
        self._lock = threading.RLock()

        ino = self._table.allocate_slot()
        root = DirectoryInode(ino=ino, blocks=BlockList(geometry))
        self._table.install(root)
        records = Directory(root, geometry)
        records.append(SELF_NAME, ino)
        records.append(PARENT_NAME, ino)

    @property
    def geometry(self) -> Geometry:
        """Return the block and record geometry."""
        return self._geometry

    @property
    def table(self) -> InodeTable:
        """Return the inode table (for inspection; mutate through the fs)."""
        return self._table

    # -- Lookup ----------------------------------------------------------------

    def resolve(self, path: str) -> Resolution:
        """Resolve *path*; a miss returns the bad-inode ``NOT_FOUND`` result."""
        with self._lock:
            return self._resolver.resolve(path)

    def exists(self, path: str) -> bool:
        """Check whether *path* names an existing node."""
        return self.resolve(path).found

    def getattr(self, path: str) -> InodeInfo:
        """Return the attributes of the node at *path*.

        Raises:
            NotFoundError: If the path does not exist.

        """
        with self._lock:
            return self._existing(path).inode.to_info()

    def open(self, path: str) -> int:
        """Check that *path* exists and return its inode number.

        Raises:
            NotFoundError: If the path does not exist.

        """
        with self._lock:
            return self._existing(path).ino

    def utimens(self, path: str, times: tuple[float, float] | None = None) -> None:
        """Accept a timestamp update; timestamps are not tracked.

        Raises:
            NotFoundError: If the path does not exist.

        """
        del times
        with self._lock:
            self._existing(path)

    def list_dir(self, path: str) -> list[DirRecord]:
        """Return the records of the directory at *path* in storage order.

        ``.`` and ``..`` are included.  The order is stable between
        mutations but may change after a removal (swap-compaction).

        Raises:
            NotFoundError: If the path does not exist.
            NotADirectoryFsError: If the path is not a directory.

        """
        with self._lock:
            return self._directory(path).records()

    def readlink(self, path: str) -> str:
        """Return the target stored in the symlink at *path*.

        Raises:
            NotFoundError: If the path does not exist.
            NotASymlinkError: If the path is not a symlink.

        """
        with self._lock:
            inode = self._existing(path).inode
            if not isinstance(inode, SymlinkInode):
                msg = f"Not a symlink: {path}"
                raise NotASymlinkError(msg)
            return decode_text(inode.target)

    # -- File content ----------------------------------------------------------

    def read(self, path: str, offset: int, length: int) -> bytes:
        """Read up to *length* bytes at *offset* from the file at *path*."""
        with self._lock:
            return fileops.read(self._existing(path).inode, offset, length)

    def write(self, path: str, offset: int, data: bytes) -> int:
        """Write *data* at *offset* into the file at *path*.

        Returns:
            The number of bytes written (always ``len(data)``).

        Raises:
            NotFoundError: If the path does not exist.
            NotAFileError: If the path is not a regular file.
            CapacityExceededError: If the file would outgrow its blocks.

        """
        with self._lock:
            return fileops.write(self._existing(path).inode, offset, data)

    def truncate(self, path: str, length: int) -> None:
        """Resize the file at *path* to *length* bytes."""
        with self._lock:
            fileops.truncate(self._existing(path).inode, length)

    # -- Node creation ---------------------------------------------------------

    def create_regular(self, path: str) -> int:
        """Create an empty regular file, or return the one already there.

        Returns:
            The inode number of the file.

        Raises:
            NotFoundError: If the parent directory does not exist.
            NotADirectoryFsError: If the parent is not a directory.
            AlreadyExistsError: If *path* names something other than a
                regular file.

        """
        with self._lock:
            existing = self._resolver.resolve(path)
            if existing.found:
                if isinstance(existing.inode, RegularInode):
                    return existing.ino
                msg = f"Already exists: {path}"
                raise AlreadyExistsError(msg)
            parent, name = self._prepare_entry(path)
            ino = self._table.allocate_slot()
            self._table.install(RegularInode(ino=ino, blocks=BlockList(self._geometry)))
            parent.append(name, ino)
            return ino

    def create_directory(self, path: str) -> int:
        """Create an empty directory holding only ``.`` and ``..``.

        The parent gains one link (the new directory's ``..``).

        Returns:
            The inode number of the new directory.

        Raises:
            NotFoundError: If the parent directory does not exist.
            NotADirectoryFsError: If the parent is not a directory.
            AlreadyExistsError: If *path* already exists.

        """
        with self._lock:
            self._reject_existing(path)
            parent, name = self._prepare_entry(path)
            ino = self._table.allocate_slot()
            child = DirectoryInode(ino=ino, blocks=BlockList(self._geometry))
            self._table.install(child)
            records = Directory(child, self._geometry)
            records.append(SELF_NAME, ino)
            records.append(PARENT_NAME, parent.inode.ino)
            parent.append(name, ino)
            parent.inode.link_count += 1
            return ino

    def create_symlink(self, target: str, path: str) -> int:
        """Create a symlink at *path* storing *target* verbatim.

        The target is not resolved and need not exist.

        Returns:
            The inode number of the new symlink.

        Raises:
            NotFoundError: If the parent directory does not exist.
            AlreadyExistsError: If *path* already exists.
            CapacityExceededError: If *target* does not fit in one block.
            InvalidArgumentError: If *target* cannot be encoded.

        """
        with self._lock:
            raw = encode_text(target)
            if len(raw) > self._geometry.block_size:
                msg = f"Symlink target longer than {self._geometry.block_size} bytes"
                raise CapacityExceededError(msg, code=ENAMETOOLONG)
            self._reject_existing(path)
            parent, name = self._prepare_entry(path)
            ino = self._table.allocate_slot()
            self._table.install(SymlinkInode(ino=ino, target=raw))
            parent.append(name, ino)
            return ino

    def hard_link(self, existing_path: str, new_path: str) -> int:
        """Give the node at *existing_path* a second name, *new_path*.

        No inode is created; the link count goes up by one.

        Returns:
            The shared inode number.

        Raises:
            NotFoundError: If *existing_path* or the new parent is missing.
            NotPermittedError: If *existing_path* is a directory.
            AlreadyExistsError: If *new_path* already exists.

        """
        with self._lock:
            source = self._existing(existing_path)
            if isinstance(source.inode, DirectoryInode):
                msg = f"Cannot hard-link a directory: {existing_path}"
                raise NotPermittedError(msg)
            self._reject_existing(new_path)
            parent, name = self._prepare_entry(new_path)
            parent.append(name, self._table.identity_of(source.inode))
            source.inode.link_count += 1
            return source.ino

    # -- Node removal ----------------------------------------------------------

    def unlink(self, path: str) -> None:
        """Remove the name *path*; free the inode when its last link goes.

        Raises:
            NotFoundError: If the path does not exist.
            IsADirectoryFsError: If the path is a directory.

        """
        with self._lock:
            target = self._existing(path)
            if isinstance(target.inode, DirectoryInode):
                msg = f"Is a directory: {path}"
                raise IsADirectoryFsError(msg)
            self._detach(path, target)

    def remove_directory(self, path: str) -> None:
        """Remove the empty directory at *path*.

        Removing the parent's record and the directory's own ``.`` drops
        both of its links, so the inode is freed; the parent loses the
        link that the child's ``..`` held.

        Raises:
            NotFoundError: If the path does not exist.
            NotADirectoryFsError: If the path is not a directory.
            DirectoryNotEmptyError: If entries besides ``.``/``..`` remain.
            BusyError: If *path* is the root.
            InvalidArgumentError: If *path* ends in ``.`` or ``..``.

        """
        with self._lock:
            target = self._existing(path)
            if not isinstance(target.inode, DirectoryInode):
                msg = f"Not a directory: {path}"
                raise NotADirectoryFsError(msg)
            if target.ino == ROOT_INO:
                msg = "Cannot remove the root directory"
                raise BusyError(msg)
            if split_path(path)[1] in {SELF_NAME, PARENT_NAME}:
                msg = f"Cannot remove a directory through {path}"
                raise InvalidArgumentError(msg)
            if not Directory(target.inode, self._geometry).is_empty:
                msg = f"Directory not empty: {path}"
                raise DirectoryNotEmptyError(msg)
            parent = self._detach(path, target)
            self._drop_link(target.ino, target.inode)
            parent.inode.link_count -= 1

    # -- Inspection ------------------------------------------------------------

    def usage(self) -> dict[str, Any]:
        """Summarise inode and block usage."""
        with self._lock:
            in_use = [inode for _, inode in self._table if not inode.is_free]
            return {
                "inodes": len(self._table),
                "inodes_in_use": len(in_use),
                "free_slots": self._table.free_count,
                "blocks_in_use": sum(inode.allocated_blocks() for inode in in_use),
                "block_size": self._geometry.block_size,
                "blocks_per_file": self._geometry.blocks_per_file,
            }

    def verify(self) -> None:
        """Check the table-wide invariants.

        - the root is a directory,
        - every record points at a live inode,
        - every link count equals the number of records naming the inode,
        - every directory owns exactly ``ceil(size / records_per_block)``
          blocks, and every file fits in its blocks.

        Raises:
            InvariantError: On the first violation found.

        """
        with self._lock:
            if not isinstance(self._table.get(ROOT_INO), DirectoryInode):
                msg = "Root inode is not a directory"
                raise InvariantError(msg)
            references: Counter[int] = Counter()
            for ino, inode in self._table:
                if isinstance(inode, DirectoryInode):
                    self._verify_directory(ino, inode, references)
                elif isinstance(inode, RegularInode) and inode.size > self._geometry.max_file_size:
                    msg = f"File {ino} is larger than its block limit"
                    raise InvariantError(msg)
            for ino, inode in self._table:
                if not inode.is_free and inode.link_count != references[ino]:
                    msg = f"Inode {ino} has {inode.link_count} links but {references[ino]} records"
                    raise InvariantError(msg)

    def _verify_directory(self, ino: int, inode: DirectoryInode, references: Counter[int]) -> None:
        expected_blocks = math.ceil(inode.size / self._geometry.records_per_block)
        if inode.allocated_blocks() != expected_blocks:
            msg = f"Directory {ino} holds {inode.size} records in {inode.allocated_blocks()} blocks"
            raise InvariantError(msg)
        for record in Directory(inode, self._geometry).records():
            if self._table.get(record.ino).is_free:
                msg = f"Directory {ino} entry {record.name!r} points at free inode {record.ino}"
                raise InvariantError(msg)
            references[record.ino] += 1

    # -- Internals -------------------------------------------------------------

    def _existing(self, path: str) -> Resolution:
        resolution = self._resolver.resolve(path)
        if not resolution.found:
            msg = f"Path not found: {path}"
            raise NotFoundError(msg)
        return resolution

    def _directory(self, path: str) -> Directory:
        inode = self._existing(path).inode
        if not isinstance(inode, DirectoryInode):
            msg = f"Not a directory: {path}"
            raise NotADirectoryFsError(msg)
        return Directory(inode, self._geometry)

    def _reject_existing(self, path: str) -> None:
        if self._resolver.resolve(path).found:
            msg = f"Already exists: {path}"
            raise AlreadyExistsError(msg)

    def _prepare_entry(self, path: str) -> tuple[Directory, str]:
        """Validate everything a new entry needs before a slot is taken."""
        parent_path, name = split_path(path)
        if not name:
            msg = f"Already exists: {path}"
            raise AlreadyExistsError(msg)
        parent = self._directory(parent_path)
        encode_name(name, self._geometry)
        if parent.is_full:
            msg = f"Directory is full: {parent_path}"
            raise CapacityExceededError(msg, code=ENOSPC)
        return parent, name

    def _detach(self, path: str, target: Resolution) -> Directory:
        """Remove *path*'s record from its parent and drop one link."""
        parent_path, name = split_path(path)
        parent = self._directory(parent_path)
        if parent.remove_by_inode_id(target.ino, name) is None:
            msg = f"Record {name!r} for inode {target.ino} missing from {parent_path}"
            raise InvariantError(msg)
        self._drop_link(target.ino, target.inode)
        return parent

    def _drop_link(self, ino: int, inode: Inode) -> None:
        inode.link_count -= 1
        if inode.link_count == 0:
            self._table.release(ino)
