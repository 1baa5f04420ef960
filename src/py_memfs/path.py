"""Path resolution — walking slash-delimited paths through directory records.

``/a/b/c.txt`` is resolved by starting at the root inode and, for each
non-empty segment, scanning the current directory's records for that
name.  ``.`` and ``..`` need no special casing: they are ordinary
records stored in every directory.

A path that does not resolve is *not* an exception here.  The resolver
returns a ``Resolution`` whose inode is the shared "bad inode" (a
``FreeInode``), and each calling operation decides what "missing"
means for it.  Symbolic links are never followed; the bridge's kernel
side does that before calling in.
"""

from __future__ import annotations

from dataclasses import dataclass

from py_memfs.config import Geometry
from py_memfs.directory import Directory
from py_memfs.inode import DirectoryInode, FreeInode, Inode
from py_memfs.inode_table import ROOT_INO, InodeTable

NOT_FOUND_INO = -1

BAD_INODE = FreeInode(ino=NOT_FOUND_INO)
"""Sentinel returned for paths that do not resolve."""


def segments(path: str) -> list[str]:
    """Split *path* into its non-empty slash-delimited segments.

    Examples::

        "/a//b/" → ["a", "b"]
        "/"      → []

    """
    return [part for part in path.split("/") if part]


def split_path(path: str) -> tuple[str, str]:
    """Split a path into (parent_path, leaf_name).

    Examples::

        "/foo/bar/baz.txt" → ("/foo/bar", "baz.txt")
        "/hello.txt"       → ("/", "hello.txt")
        "/"                → ("/", "")

    """
    parts = segments(path)
    if not parts:
        return ("/", "")
    return ("/" + "/".join(parts[:-1]), parts[-1])


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one path: an inode number and the inode itself."""

    ino: int
    inode: Inode

    @property
    def found(self) -> bool:
        """Return True unless this is the bad-inode result."""
        return not self.inode.is_free


NOT_FOUND = Resolution(ino=NOT_FOUND_INO, inode=BAD_INODE)


class PathResolver:
    """Resolve paths against one inode table."""

    def __init__(self, table: InodeTable, geometry: Geometry) -> None:
        """Bind the resolver to *table* and its record *geometry*."""
        self._table = table
        self._geometry = geometry

    def resolve(self, path: str) -> Resolution:
        """Walk *path* from the root and return what it names.

        Returns ``NOT_FOUND`` when a segment is missing or an
        intermediate segment is not a directory.
        """
        ino = ROOT_INO
        current = self._table.get(ino)
        for part in segments(path):
            if not isinstance(current, DirectoryInode):
                return NOT_FOUND
            child = Directory(current, self._geometry).lookup(part)
            if child is None:
                return NOT_FOUND
            ino = child
            current = self._table.get(ino)
        if current.is_free:
            # A record survived its inode; treat it like any other miss.
            return NOT_FOUND
        return Resolution(ino=ino, inode=current)
