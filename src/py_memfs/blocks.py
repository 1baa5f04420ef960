"""Block store — the raw byte storage owned by one inode.

Each inode that holds data (regular files and directories) owns a
``BlockList``: a fixed number of slots, each either empty (``None``) or
a zero-filled ``bytearray`` of exactly ``block_size`` bytes.  A block
belongs to exactly one inode and is dropped when that inode is freed
or truncated.

Byte offsets map onto blocks with plain division::

    block_index, position = divmod(offset, block_size)
"""

from __future__ import annotations

from py_memfs.config import DEFAULT_GEOMETRY, Geometry
from py_memfs.errors import CapacityExceededError


class BlockList:
    """Fixed-capacity sequence of lazily allocated data blocks."""

    def __init__(self, geometry: Geometry = DEFAULT_GEOMETRY) -> None:
        """Create a block list with every slot empty."""
        self._geometry = geometry
        self._blocks: list[bytearray | None] = [None] * geometry.blocks_per_file

    @property
    def block_size(self) -> int:
        """Return the size of one block in bytes."""
        return self._geometry.block_size

    @property
    def capacity(self) -> int:
        """Return the number of block slots."""
        return len(self._blocks)

    @property
    def allocated(self) -> int:
        """Return how many slots currently hold a block."""
        return sum(1 for block in self._blocks if block is not None)

    def get(self, index: int) -> bytearray | None:
        """Return the block at *index*, or None if it was never allocated."""
        self._check_index(index)
        return self._blocks[index]

    def ensure(self, index: int) -> bytearray:
        """Return the block at *index*, allocating a zeroed one if needed.

        Raises:
            CapacityExceededError: If *index* is past the last slot.

        """
        self._check_index(index)
        block = self._blocks[index]
        if block is None:
            block = bytearray(self._geometry.block_size)
            self._blocks[index] = block
        return block

    def release(self, index: int) -> None:
        """Drop the block at *index* (no-op when already empty)."""
        self._check_index(index)
        self._blocks[index] = None

    def release_from(self, index: int) -> None:
        """Drop every block at position *index* and beyond."""
        for i in range(max(index, 0), len(self._blocks)):
            self._blocks[i] = None

    def release_all(self) -> None:
        """Drop every block."""
        self.release_from(0)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._blocks):
            msg = f"Block index {index} outside 0..{len(self._blocks) - 1}"
            raise CapacityExceededError(msg)
