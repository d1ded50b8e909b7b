"""Path-tree nodes built incrementally from root-relative path strings."""

from __future__ import annotations

from pathlib import PurePosixPath


def node_sort_key(node: FileNode) -> tuple[bool, str]:
    """Directories first, then ascending by final path segment."""
    return (not node.is_dir, node.path.name)


def is_same_or_nested(target: PurePosixPath, ancestor: PurePosixPath) -> bool:
    """Return whether ``target`` equals ``ancestor`` or lies below it.

    Comparison is segment-wise, so ``src`` is not an ancestor of ``src2/x``.
    """
    ancestor_parts = ancestor.parts
    return target.parts[: len(ancestor_parts)] == ancestor_parts


class FileNode:
    """A file or directory entry owning its sorted children."""

    __slots__ = ("path", "is_dir", "expanded", "children")

    def __init__(self, path: PurePosixPath, is_dir: bool) -> None:
        self.path = path
        self.is_dir = is_dir
        self.expanded = False
        self.children: list[FileNode] = []

    def __repr__(self) -> str:
        kind = "dir" if self.is_dir else "file"
        return f"FileNode({str(self.path)!r}, {kind}, expanded={self.expanded}, children={len(self.children)})"

    def child_for(self, path: PurePosixPath) -> FileNode | None:
        for child in self.children:
            if child.path == path:
                return child
        return None

    def insert(self, segments: tuple[str, ...]) -> None:
        """Insert the remaining ``segments`` below this node.

        Missing intermediate entries are created as directories; the final
        segment is created as a file. Existing nodes are reused, so inserting
        the same path twice adds nothing.
        """
        if not segments:
            return
        head, rest = segments[0], segments[1:]
        child_path = self.path / head
        child = self.child_for(child_path)
        if child is None:
            child = FileNode(child_path, is_dir=bool(rest))
            self.children.append(child)
        elif rest and not child.is_dir:
            # A file that later gains children is promoted to a directory.
            child.is_dir = True
        child.insert(rest)
        self.sort_children()

    def sort_children(self) -> None:
        self.children.sort(key=node_sort_key)

    def find(self, target: PurePosixPath) -> FileNode | None:
        """Find the node at ``target``, descending only into matching prefixes."""
        if self.path == target:
            return self
        for child in self.children:
            if not is_same_or_nested(target, child.path):
                continue
            found = child.find(target)
            if found is not None:
                return found
        return None

    def iter_nodes(self):
        """Yield every descendant depth-first in sibling order."""
        for child in self.children:
            yield child
            yield from child.iter_nodes()

    def expanded_paths(self) -> set[PurePosixPath]:
        return {node.path for node in self.iter_nodes() if node.is_dir and node.expanded}
