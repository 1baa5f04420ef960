"""File operations — byte ranges mapped onto fixed-size blocks.

A read or write of ``length`` bytes at ``offset`` starts in block
``offset // block_size`` at position ``offset % block_size`` and is cut
at every block boundary it crosses::

    offset=120, length=20, block_size=128

    block 0: [............................|xxxxxxxx]   bytes 120..127
    block 1: [xxxxxxxxxxxx|...........................]   bytes 128..139

Blocks that were never allocated read back as zeros.
"""

from __future__ import annotations

from collections.abc import Iterator

from py_memfs.errors import (
    CapacityExceededError,
    InvalidArgumentError,
    IsADirectoryFsError,
    NotAFileError,
)
from py_memfs.inode import DirectoryInode, Inode, RegularInode


def _require_regular(inode: Inode) -> RegularInode:
    if isinstance(inode, DirectoryInode):
        msg = f"Is a directory: inode {inode.ino}"
        raise IsADirectoryFsError(msg)
    if not isinstance(inode, RegularInode):
        msg = f"Not a regular file: inode {inode.ino} is {inode.kind}"
        raise NotAFileError(msg)
    return inode


def _spans(offset: int, length: int, block_size: int) -> Iterator[tuple[int, int, int]]:
    """Yield ``(block_index, start_in_block, chunk_length)`` for a byte range."""
    index, start = divmod(offset, block_size)
    remaining = length
    while remaining > 0:
        chunk = min(remaining, block_size - start)
        yield index, start, chunk
        remaining -= chunk
        index += 1
        start = 0


def read(inode: Inode, offset: int, length: int) -> bytes:
    """Return up to *length* bytes of *inode* starting at *offset*.

    Reading at or past the end of the file returns ``b""``; a read that
    runs past the end is clamped to the file size.

    Raises:
        NotAFileError: If *inode* is not a regular file.
        InvalidArgumentError: If *offset* or *length* is negative.

    """
    node = _require_regular(inode)
    if offset < 0 or length < 0:
        msg = f"Invalid read range: offset={offset} length={length}"
        raise InvalidArgumentError(msg)
    if offset >= node.size:
        return b""
    length = min(length, node.size - offset)

    out = bytearray()
    for index, start, chunk in _spans(offset, length, node.blocks.block_size):
        block = node.blocks.get(index)
        if block is None:
            out += bytes(chunk)
        else:
            out += block[start : start + chunk]
    return bytes(out)


def write(inode: Inode, offset: int, data: bytes) -> int:
    """Copy *data* into *inode* at *offset* and return the bytes written.

    Every block from the start of the file up to the last one touched is
    allocated if missing, so a gap left by writing past the end reads
    back as zeros.  The write is all-or-nothing.

    Raises:
        NotAFileError: If *inode* is not a regular file.
        InvalidArgumentError: If *offset* is negative.
        CapacityExceededError: If the write would end past the largest
            file size.

    """
    node = _require_regular(inode)
    if offset < 0:
        msg = f"Invalid write offset: {offset}"
        raise InvalidArgumentError(msg)
    if not data:
        return 0
    end = offset + len(data)
    max_size = node.blocks.capacity * node.blocks.block_size
    if end > max_size:
        msg = f"Write to {offset}..{end} exceeds the {max_size}-byte file limit"
        raise CapacityExceededError(msg)

    block_size = node.blocks.block_size
    for index in range((end - 1) // block_size + 1):
        node.blocks.ensure(index)

    position = 0
    for index, start, chunk in _spans(offset, len(data), block_size):
        node.blocks.ensure(index)[start : start + chunk] = data[position : position + chunk]
        position += chunk
    node.size = max(node.size, end)
    return len(data)


def truncate(inode: Inode, length: int) -> None:
    """Set the size of *inode* to *length*.

    Shrinking drops every block wholly past the new end and zeroes the
    tail of the last kept block, so a later extension reads zeros.
    Extending only moves the size; the new range reads as zeros.

    Raises:
        NotAFileError: If *inode* is not a regular file.
        InvalidArgumentError: If *length* is negative.
        CapacityExceededError: If *length* exceeds the largest file size.

    """
    node = _require_regular(inode)
    if length < 0:
        msg = f"Invalid truncate length: {length}"
        raise InvalidArgumentError(msg)
    block_size = node.blocks.block_size
    max_size = node.blocks.capacity * block_size
    if length > max_size:
        msg = f"Truncate to {length} exceeds the {max_size}-byte file limit"
        raise CapacityExceededError(msg)

    if length < node.size:
        keep_blocks, tail = divmod(length, block_size)
        if tail:
            block = node.blocks.get(keep_blocks)
            if block is not None:
                block[tail:] = bytes(block_size - tail)
            keep_blocks += 1
        node.blocks.release_from(keep_blocks)
    node.size = length
