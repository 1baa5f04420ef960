"""Directory store — packed name records inside a directory's blocks.

A directory's blocks are treated as one flat array of fixed-size
records.  Record *i* lives at::

    block_index, slot = divmod(i, records_per_block)

and ``directory.size`` is always the exact record count, with records
packed from index 0 and no gaps.

Each record is ``record_size`` bytes: a little-endian signed 32-bit
inode id followed by the UTF-8 name, NUL-padded.  Names may not
contain NUL themselves; bytes that are not valid UTF-8 round-trip
through surrogate escapes, as ``os.fsdecode`` produces them.

Removal is **swap-compact**: the victim is overwritten by the last
record and the count shrinks by one.  That keeps removal O(1) after the
scan, but it reorders entries — a listing taken after a removal may
differ in order from one taken before it.
"""

from __future__ import annotations

import struct
from errno import ENOSPC
from typing import NamedTuple

from py_memfs.config import Geometry
from py_memfs.errors import (
    CapacityExceededError,
    InvalidArgumentError,
    InvariantError,
    NameTooLongError,
)
from py_memfs.inode import DirectoryInode

SELF_NAME = "."
PARENT_NAME = ".."

_INODE_ID = struct.Struct("<i")
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


class DirRecord(NamedTuple):
    """One ``name → inode`` entry in a directory."""

    name: str
    ino: int


def encode_text(text: str) -> bytes:
    """Return *text* as stored bytes.

    Undecodable bytes that ``os.fsdecode`` smuggled in as lone
    surrogates go back to the bytes they came from.

    Raises:
        InvalidArgumentError: If *text* holds a surrogate that did not
            come from an undecodable byte.

    """
    try:
        return text.encode(_ENCODING, _ERRORS)
    except UnicodeEncodeError as e:
        msg = f"Cannot store {text!r}: {e.reason}"
        raise InvalidArgumentError(msg) from e


def decode_text(raw: bytes) -> str:
    """Return stored bytes as text; the inverse of ``encode_text``."""
    return raw.decode(_ENCODING, _ERRORS)


def encode_name(name: str, geometry: Geometry) -> bytes:
    """Return *name* as stored bytes, checking it fits in a record.

    Raises:
        InvalidArgumentError: If *name* contains a NUL byte or cannot be
            encoded.
        NameTooLongError: If the encoded name is longer than ``name_max``.

    """
    if "\0" in name:
        msg = f"Name contains a NUL byte: {name!r}"
        raise InvalidArgumentError(msg)
    raw = encode_text(name)
    if len(raw) > geometry.name_max:
        msg = f"Name too long ({len(raw)} > {geometry.name_max} bytes): {name}"
        raise NameTooLongError(msg)
    return raw


class Directory:
    """Record-level view over a ``DirectoryInode``.

    The view holds no state of its own; every method reads or mutates
    the inode's blocks and ``size`` directly.
    """

    def __init__(self, inode: DirectoryInode, geometry: Geometry) -> None:
        """Wrap *inode* using *geometry* for record addressing."""
        self._inode = inode
        self._geometry = geometry
        self._per_block = geometry.records_per_block

    @property
    def inode(self) -> DirectoryInode:
        """Return the wrapped directory inode."""
        return self._inode

    def __len__(self) -> int:
        """Return the number of records."""
        return self._inode.size

    @property
    def is_full(self) -> bool:
        """Return True if no further record can be appended."""
        return self._inode.size >= self._geometry.max_dir_entries

    @property
    def is_empty(self) -> bool:
        """Return True if only the ``.`` and ``..`` records remain."""
        return self._inode.size <= 2  # noqa: PLR2004

    def append(self, name: str, ino: int) -> None:
        """Add a record at index ``size``, allocating a block when needed.

        Raises:
            NameTooLongError: If *name* does not fit in a record.
            CapacityExceededError: If the directory already holds the
                maximum number of records.

        """
        raw = encode_name(name, self._geometry)
        if self.is_full:
            msg = f"Directory {self._inode.ino} is full ({self._inode.size} entries)"
            raise CapacityExceededError(msg, code=ENOSPC)
        block_index, slot = divmod(self._inode.size, self._per_block)
        block = self._inode.blocks.ensure(block_index) if slot == 0 else self._block(block_index)
        self._write(block, slot, raw, ino)
        self._inode.size += 1

    def lookup(self, name: str) -> int | None:
        """Return the inode number recorded under *name*, or None."""
        for record in self.records():
            if record.name == name:
                return record.ino
        return None

    def remove_by_inode_id(self, ino: int, name: str | None = None) -> DirRecord | None:
        """Remove the first record pointing at *ino* by swap-compaction.

        When *name* is given, only a record with that name and inode
        qualifies; this matters when one directory holds two hard links
        to the same inode.

        Returns:
            The removed record, or None if nothing matched.

        """
        for index, record in enumerate(self.records()):
            if record.ino == ino and (name is None or record.name == name):
                break
        else:
            return None

        last = self._inode.size - 1
        if index != last:
            moved = self._read(last)
            block_index, slot = divmod(index, self._per_block)
            self._write(self._block(block_index), slot, encode_text(moved.name), moved.ino)
        self._inode.size = last

        last_block, last_slot = divmod(last, self._per_block)
        if last_slot == 0:
            self._inode.blocks.release(last_block)
        return record

    def records(self) -> list[DirRecord]:
        """Return every record in storage order."""
        return [self._read(i) for i in range(self._inode.size)]

    def _block(self, block_index: int) -> bytearray:
        block = self._inode.blocks.get(block_index)
        if block is None:
            msg = f"Directory {self._inode.ino} lost block {block_index}"
            raise InvariantError(msg)
        return block

    def _read(self, index: int) -> DirRecord:
        block_index, slot = divmod(index, self._per_block)
        start = slot * self._geometry.record_size
        block = self._block(block_index)
        (ino,) = _INODE_ID.unpack_from(block, start)
        raw = bytes(block[start + _INODE_ID.size : start + self._geometry.record_size])
        return DirRecord(name=decode_text(raw.split(b"\0", 1)[0]), ino=ino)

    def _write(self, block: bytearray, slot: int, raw_name: bytes, ino: int) -> None:
        start = slot * self._geometry.record_size
        end = start + self._geometry.record_size
        block[start:end] = bytes(self._geometry.record_size)
        _INODE_ID.pack_into(block, start, ino)
        name_start = start + _INODE_ID.size
        block[name_start : name_start + len(raw_name)] = raw_name
