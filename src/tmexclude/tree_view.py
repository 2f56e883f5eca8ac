"""Tree rendering of an exclusion list for ``timemachine-exclude list --tree``."""

import os
from typing import Any, Dict, Iterator, Optional, Sequence

from anytree import ContStyle, Node, RenderTree

EXCLUDED_MARKER = " [excluded]"


class ExclusionNode(Node):  # type: ignore
    """Node for one path component in the exclusion tree.

    Extends anytree.Node with a flag telling whether the directory at this node is itself an
    exclusion entry, as opposed to an ancestor shown only for structure.

    Attributes:
        name (str): The path component, or the common ancestor path for the root node.
        is_excluded (bool): True if this directory is an exclusion entry.

    Example:
        >>> root = ExclusionNode("/home/u")
        >>> child = ExclusionNode("node_modules", parent=root, is_excluded=True)
        >>> child.is_excluded
        True
    """

    def __init__(
        self, name: str, parent: Optional["ExclusionNode"] = None, is_excluded: bool = False, **kwargs: Any
    ) -> None:
        super().__init__(name, parent, **kwargs)
        self.is_excluded = is_excluded


def build_tree(entries: Sequence[str]) -> Optional[ExclusionNode]:
    """Arrange exclusion entries below their deepest common ancestor directory.

    Args:
        entries: Absolute paths, in the order they should appear among siblings.

    Returns:
        The root node, or None if there are no entries.
    """
    if not entries:
        return None

    base = os.path.commonpath(entries)
    if base in entries:
        # Keep every entry below the root so it is rendered with its marker
        base = os.path.dirname(base)
    root = ExclusionNode(base)
    index: Dict[str, ExclusionNode] = {base: root}

    for entry in entries:
        parent = root
        current = base
        for part in os.path.relpath(entry, base).split(os.sep):
            current = os.path.join(current, part)
            node = index.get(current)
            if node is None:
                node = ExclusionNode(part, parent=parent)
                index[current] = node
            parent = node
        parent.is_excluded = True

    return root


def stream_tree(entries: Sequence[str]) -> Iterator[str]:
    """Yield the lines of the exclusion tree, one line per node.

    Example:
        >>> for line in stream_tree(["/p/app/node_modules", "/p/app/dist", "/p/lib/build"]):
        ...     print(line)
        /p/
        ├── app/
        │   ├── node_modules/ [excluded]
        │   └── dist/ [excluded]
        └── lib/
            └── build/ [excluded]
    """
    root = build_tree(entries)
    if root is None:
        return

    for prefix, _, node in RenderTree(root, style=ContStyle()):
        name = node.name if node.name.endswith("/") else f"{node.name}/"
        yield f"{prefix}{name}{EXCLUDED_MARKER if node.is_excluded else ''}"
