"""Inode variants — one record shape per kind of filesystem object.

An inode is the metadata-plus-storage record for a file, directory, or
symbolic link.  Its **name** does not live here; names live in directory
records, which is what lets several names share one inode (hard links).

Each kind carries only the payload it needs:

- ``RegularInode`` — a ``BlockList`` of file content.
- ``DirectoryInode`` — a ``BlockList`` holding packed directory records.
- ``SymlinkInode`` — the target path as bytes.
- ``FreeInode`` — an unused slot; nothing at all.

Freeing an inode swaps its slot in the inode table for a ``FreeInode``
with the same number, so the table never shifts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import ClassVar

from py_memfs.blocks import BlockList
from py_memfs.config import DIRECTORY_MODE, REGULAR_MODE, SYMLINK_MODE


class InodeKind(StrEnum):
    """The kind of object an inode slot currently holds."""

    FREE = "free"
    REGULAR = "regular"
    DIRECTORY = "directory"
    SYMLINK = "symlink"


_MODES = {
    InodeKind.FREE: 0,
    InodeKind.REGULAR: REGULAR_MODE,
    InodeKind.DIRECTORY: DIRECTORY_MODE,
    InodeKind.SYMLINK: SYMLINK_MODE,
}


@dataclass(frozen=True)
class InodeInfo:
    """Read-only snapshot of an inode's attributes (returned by getattr)."""

    ino: int
    kind: InodeKind
    size: int
    link_count: int
    mode: int
    blocks: int = 0

    def to_stat(self) -> dict[str, int]:
        """Return the attributes as a ``st_*`` dictionary for the bridge."""
        return {
            "st_ino": self.ino,
            "st_mode": self.mode,
            "st_nlink": self.link_count,
            "st_size": self.size,
            "st_blocks": self.blocks,
        }


@dataclass
class Inode:
    """Fields common to every inode kind."""

    ino: int
    size: int = 0
    link_count: int = 0

    kind: ClassVar[InodeKind] = InodeKind.FREE

    @property
    def is_free(self) -> bool:
        """Return True if this slot holds no object."""
        return self.kind is InodeKind.FREE

    def allocated_blocks(self) -> int:
        """Return the number of data blocks this inode owns."""
        return 0

    def release(self) -> None:
        """Drop all storage owned by this inode."""

    def to_info(self) -> InodeInfo:
        """Create a read-only snapshot of this inode."""
        return InodeInfo(
            ino=self.ino,
            kind=self.kind,
            size=self.size,
            link_count=self.link_count,
            mode=_MODES[self.kind],
            blocks=self.allocated_blocks(),
        )


@dataclass
class FreeInode(Inode):
    """An unused slot in the inode table."""


@dataclass
class RegularInode(Inode):
    """A regular file whose content lives in ``blocks``."""

    link_count: int = 1
    blocks: BlockList = field(default_factory=BlockList)

    kind: ClassVar[InodeKind] = InodeKind.REGULAR

    def allocated_blocks(self) -> int:
        """Return the number of allocated content blocks."""
        return self.blocks.allocated

    def release(self) -> None:
        """Drop all content blocks and reset the size."""
        self.blocks.release_all()
        self.size = 0


@dataclass
class DirectoryInode(Inode):
    """A directory; ``size`` counts the records packed into ``blocks``."""

    link_count: int = 2
    blocks: BlockList = field(default_factory=BlockList)

    kind: ClassVar[InodeKind] = InodeKind.DIRECTORY

    def allocated_blocks(self) -> int:
        """Return the number of allocated record blocks."""
        return self.blocks.allocated

    def release(self) -> None:
        """Drop all record blocks and reset the record count."""
        self.blocks.release_all()
        self.size = 0


@dataclass
class SymlinkInode(Inode):
    """A symbolic link; ``size`` is the length of ``target``."""

    link_count: int = 1
    target: bytes = b""

    kind: ClassVar[InodeKind] = InodeKind.SYMLINK

    def __post_init__(self) -> None:
        """Keep ``size`` in step with the stored target."""
        self.size = len(self.target)

    def allocated_blocks(self) -> int:
        """Return 1 when a target is stored, else 0."""
        return 1 if self.target else 0

    def release(self) -> None:
        """Forget the target."""
        self.target = b""
        self.size = 0
