"""Inode table — positional identity with first-fit slot reuse.

An inode's number is simply its index in the table.  Slots are never
removed: freeing an inode replaces it with a ``FreeInode`` carrying the
same number, so every id handed out earlier still points at the same
position (possibly a free one).

Allocation is first-fit: the lowest-numbered free slot wins, and only
when there is none does the table grow.  A min-heap of free ids keeps
that lookup cheap without changing which slot is picked.
"""

from __future__ import annotations

import heapq
from collections.abc import Iterator

from py_memfs.errors import InvariantError
from py_memfs.inode import FreeInode, Inode

ROOT_INO = 0


class InodeTable:
    """Growable arena of inode slots indexed by inode number."""

    def __init__(self) -> None:
        """Create an empty table (the filesystem installs the root)."""
        self._slots: list[Inode] = []
        self._free_ids: list[int] = []

    def __len__(self) -> int:
        """Return the number of slots, free or not."""
        return len(self._slots)

    def __iter__(self) -> Iterator[tuple[int, Inode]]:
        """Iterate over ``(ino, inode)`` pairs in slot order."""
        return iter(enumerate(self._slots))

    @property
    def free_count(self) -> int:
        """Return the number of free slots awaiting reuse."""
        return len(self._free_ids)

    def allocate_slot(self) -> int:
        """Reserve a slot and return its inode number.

        The lowest-numbered free slot is reused if one exists; otherwise
        a new free slot is appended.  The slot stays ``Free`` until the
        caller installs a concrete inode with ``install()``.
        """
        if self._free_ids:
            return heapq.heappop(self._free_ids)
        ino = len(self._slots)
        self._slots.append(FreeInode(ino=ino))
        return ino

    def install(self, inode: Inode) -> Inode:
        """Place *inode* in the slot named by its ``ino``.

        Raises:
            InvariantError: If the slot is outside the table or occupied.

        """
        current = self.get(inode.ino)
        if not current.is_free:
            msg = f"Inode slot {inode.ino} is already in use"
            raise InvariantError(msg)
        self._slots[inode.ino] = inode
        return inode

    def get(self, ino: int) -> Inode:
        """Return the inode in slot *ino*.

        Only the bounds are checked; a free slot is returned as-is.

        Raises:
            InvariantError: If *ino* is outside the table.

        """
        if not 0 <= ino < len(self._slots):
            msg = f"Inode {ino} outside table of {len(self._slots)} slots"
            raise InvariantError(msg)
        return self._slots[ino]

    def release(self, ino: int) -> None:
        """Drop the storage of inode *ino* and mark its slot free.

        Raises:
            InvariantError: If *ino* is the root or already free.

        """
        if ino == ROOT_INO:
            msg = "The root inode cannot be freed"
            raise InvariantError(msg)
        inode = self.get(ino)
        if inode.is_free:
            msg = f"Inode {ino} is already free"
            raise InvariantError(msg)
        inode.release()
        self._slots[ino] = FreeInode(ino=ino)
        heapq.heappush(self._free_ids, ino)

    def identity_of(self, inode: Inode) -> int:
        """Return the position of *inode* in the table.

        Raises:
            InvariantError: If *inode* is not the object stored at its slot.

        """
        if self.get(inode.ino) is not inode:
            msg = f"Inode object does not live at slot {inode.ino}"
            raise InvariantError(msg)
        return inode.ino
