# patchspace/core/tree_builder.py
from typing import Iterable, Iterator, List, Tuple
from loguru import logger

from .models import TreeNode

ROOT_NAME = "root"

def build_tree(paths: Iterable[str]) -> TreeNode:
    """
    Builds the directory hierarchy implied by a set of flat project paths.

    Every non-final segment becomes a directory node (created once per parent and
    reused afterwards); the final segment becomes a file leaf. A bare filename
    hangs directly off the root. Paths are visited in sorted order so the result
    does not depend on the enumeration order of the source.
    """
    root = TreeNode(name=ROOT_NAME, path="", is_dir=True)

    for path in sorted(set(paths)):
        parts = [part for part in path.split("/") if part]
        current = root
        for i, part in enumerate(parts):
            is_file = i == len(parts) - 1
            node = current.children.get(part)
            if node is None:
                node = TreeNode(name=part, path="/".join(parts[:i + 1]), is_dir=not is_file)
                current.children[part] = node
            elif not is_file and not node.is_dir:
                # A name used both as a file and as a directory: the directory wins
                logger.warning(f"Path segment '{node.path}' is both a file and a directory; showing it as a directory.")
                node.is_dir = True
                node.children = {}
            current = node

    logger.debug(f"Built tree with {len(root.children)} top-level entries.")
    return root

def sorted_children(node: TreeNode) -> List[TreeNode]:
    """Children for display: directories first, then by name (case-insensitive)."""
    if not node.is_dir:
        return []
    return sorted(node.children.values(), key=lambda n: (not n.is_dir, n.name.lower(), n.name))

def iter_sorted(node: TreeNode, depth: int = 0) -> Iterator[Tuple[int, TreeNode]]:
    """Depth-first traversal in display order, yielding (depth, node). The root itself is not yielded."""
    for child in sorted_children(node):
        yield depth, child
        if child.is_dir:
            yield from iter_sorted(child, depth + 1)

def render_tree(root: TreeNode, indent: str = "  ") -> str:
    """Plain-text rendering of the tree, one entry per line, directories suffixed with '/'."""
    lines = []
    for depth, node in iter_sorted(root):
        suffix = "/" if node.is_dir else ""
        lines.append(f"{indent * depth}{node.name}{suffix}")
    return "\n".join(lines)
