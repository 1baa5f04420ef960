"""Filesystem geometry and fixed attribute bits.

Everything about the on-memory layout is derived from four numbers:

- **block_size** — bytes in one data block.
- **blocks_per_file** — how many blocks a single inode may own.
- **record_size** — bytes in one directory record (inode id + name).
- **name_max** — longest entry name in bytes; the record reserves one
  extra byte for the terminating NUL.

The defaults match a deliberately tiny filesystem: 128-byte blocks,
32 blocks per inode, 32-byte directory records.  That gives files of at
most 4 KiB and directories of at most 128 entries.
"""

import stat
from dataclasses import dataclass

INODE_ID_BYTES = 4
"""Width of the inode id field at the start of every directory record."""

REGULAR_MODE = stat.S_IFREG | 0o776
DIRECTORY_MODE = stat.S_IFDIR | 0o777
SYMLINK_MODE = stat.S_IFLNK | 0o777


@dataclass(frozen=True)
class Geometry:
    """Block and record sizes shared by every inode in one filesystem."""

    block_size: int = 128
    blocks_per_file: int = 32
    record_size: int = 32
    name_max: int = 27

    def __post_init__(self) -> None:
        """Reject layouts that cannot hold a single record.

        Raises:
            ValueError: If any size is non-positive or the pieces do not fit.

        """
        if self.block_size <= 0 or self.blocks_per_file <= 0:
            msg = f"Block size and count must be positive: {self}"
            raise ValueError(msg)
        if self.record_size > self.block_size:
            msg = f"Record size {self.record_size} exceeds block size {self.block_size}"
            raise ValueError(msg)
        if self.name_max <= 0 or INODE_ID_BYTES + self.name_max + 1 > self.record_size:
            msg = f"Name limit {self.name_max} does not fit in a {self.record_size}-byte record"
            raise ValueError(msg)

    @property
    def records_per_block(self) -> int:
        """Return how many directory records fit in one block."""
        return self.block_size // self.record_size

    @property
    def max_file_size(self) -> int:
        """Return the largest regular file size in bytes."""
        return self.blocks_per_file * self.block_size

    @property
    def max_dir_entries(self) -> int:
        """Return the largest number of records a directory can hold."""
        return self.blocks_per_file * self.records_per_block


DEFAULT_GEOMETRY = Geometry()
