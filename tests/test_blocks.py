"""Tests for the block store — one inode's fixed set of data blocks."""

import pytest

from py_memfs.blocks import BlockList
from py_memfs.config import Geometry
from py_memfs.errors import CapacityExceededError

SMALL = Geometry(block_size=64, blocks_per_file=4, record_size=32, name_max=27)


class TestBlockList:
    """Verify lazy allocation, bounds, and release."""

    def test_new_list_has_no_blocks(self) -> None:
        """Every slot starts empty."""
        blocks = BlockList(SMALL)
        assert blocks.allocated == 0
        assert blocks.capacity == SMALL.blocks_per_file
        assert all(blocks.get(i) is None for i in range(blocks.capacity))

    def test_ensure_allocates_zeroed_block(self) -> None:
        """ensure() returns a zero-filled block of block_size bytes."""
        blocks = BlockList(SMALL)
        block = blocks.ensure(2)
        assert block == bytearray(SMALL.block_size)
        assert blocks.allocated == 1

    def test_ensure_returns_same_block(self) -> None:
        """A second ensure() on the same index returns the same object."""
        blocks = BlockList(SMALL)
        first = blocks.ensure(0)
        first[0] = 7
        assert blocks.ensure(0) is first

    def test_get_unallocated_returns_none(self) -> None:
        """get() does not allocate."""
        blocks = BlockList(SMALL)
        assert blocks.get(1) is None

    def test_index_past_capacity_raises(self) -> None:
        """Slots beyond blocks_per_file do not exist."""
        blocks = BlockList(SMALL)
        with pytest.raises(CapacityExceededError):
            blocks.ensure(SMALL.blocks_per_file)

    def test_negative_index_raises(self) -> None:
        """Negative indexes are not wrapped around."""
        blocks = BlockList(SMALL)
        with pytest.raises(CapacityExceededError):
            blocks.get(-1)

    def test_release_from_drops_tail(self) -> None:
        """release_from(i) empties slot i and everything after it."""
        blocks = BlockList(SMALL)
        for i in range(4):
            blocks.ensure(i)
        blocks.release_from(2)
        expected = 2
        assert blocks.allocated == expected
        assert blocks.get(2) is None

    def test_release_all(self) -> None:
        """release_all() empties every slot."""
        blocks = BlockList(SMALL)
        blocks.ensure(0)
        blocks.ensure(3)
        blocks.release_all()
        assert blocks.allocated == 0
