"""Tree of the field paths mentioned in patterns, used to prune event flattening."""

from __future__ import annotations

from abc import ABC, abstractmethod

SEGMENT_SEPARATOR = "\n"


def _as_text(segment: bytes | str) -> str:
    if isinstance(segment, (bytes, bytearray, memoryview)):
        return bytes(segment).decode("utf-8")
    return segment


class SegmentsTreeTracker(ABC):
    """What a flattener needs to know about the paths used by patterns.

    A flattener walks the event together with the tracker: it asks whether a
    member name is used at all, whether it must descend into an object, and
    how many nodes and fields remain at the current level so that it can stop
    early once all of them have been seen.
    """

    @abstractmethod
    def get(self, segment: bytes | str) -> SegmentsTreeTracker | None:
        """Return the child node for ``segment``, or None if there is none."""

    @abstractmethod
    def is_root(self) -> bool:
        """Whether this is the root of the tree."""

    @abstractmethod
    def is_segment_used(self, segment: bytes | str) -> bool:
        """Whether ``segment`` is mentioned, as a node or a field, at this level."""

    @abstractmethod
    def path_for_segment(self, segment: bytes | str) -> bytes | None:
        """The full path of the field ``segment`` at this level, if it is one."""

    @abstractmethod
    def nodes_count(self) -> int:
        """Number of non-leaf children."""

    @abstractmethod
    def fields_count(self) -> int:
        """Number of leaf children."""


class SegmentsTree(SegmentsTreeTracker):
    """A node of the segments tree; the root is created by ``new_segments_index``."""

    def __init__(self, root: bool) -> None:
        self.root = root
        self.nodes: dict[str, SegmentsTree] = {}
        self.fields: dict[str, bytes] = {}

    def add(self, path: str) -> None:
        """Record a newline-separated field path."""
        segments = path.split(SEGMENT_SEPARATOR)
        if len(segments) == 1:
            self.fields[path] = path.encode("utf-8")
            return

        node = self
        for segment in segments[:-1]:
            node = node.nodes.setdefault(segment, SegmentsTree(False))
        node.fields.setdefault(segments[-1], path.encode("utf-8"))

    def get(self, segment: bytes | str) -> SegmentsTree | None:
        return self.nodes.get(_as_text(segment))

    def is_root(self) -> bool:
        return self.root

    def is_segment_used(self, segment: bytes | str) -> bool:
        name = _as_text(segment)
        return name in self.fields or name in self.nodes

    def path_for_segment(self, segment: bytes | str) -> bytes | None:
        return self.fields.get(_as_text(segment))

    def nodes_count(self) -> int:
        return len(self.nodes)

    def fields_count(self) -> int:
        return len(self.fields)

    def __str__(self) -> str:
        nodes = ",".join(self.nodes)
        fields = ",".join(self.fields)
        return f"root: {str(self.root).lower()}, nodes [{nodes}], fields: [{fields}]"

    def copy(self) -> SegmentsTree:
        """Return an independent deep copy of this subtree."""
        fresh = SegmentsTree(self.root)
        fresh.fields = dict(self.fields)
        fresh.nodes = {name: node.copy() for name, node in self.nodes.items()}
        return fresh


def new_segments_index(*paths: str) -> SegmentsTree:
    """Create a root node, adding each of ``paths`` to it."""
    tree = SegmentsTree(True)
    for path in paths:
        tree.add(path)
    return tree