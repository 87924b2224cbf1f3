from __future__ import annotations

from coalseq.simulation.tree import PartitionTree, TreeNode


def _label(node: TreeNode, *, is_root: bool) -> str:
    text = node.id or ""
    if not is_root or node.branch_length:
        text += f":{node.branch_length!r}"
    return text


def to_newick(tree: PartitionTree | TreeNode) -> str:
    """Serialise a built tree back to a Newick string.

    Branch lengths are written with ``repr`` so parsing the output again
    reproduces them exactly. The root's branch length is only written when it
    is non-zero.
    """
    root = tree.root if isinstance(tree, PartitionTree) else tree
    if root is None:
        raise ValueError("Cannot serialise a tree that has not been built")

    parts: list[str] = []
    stack: list[tuple[TreeNode, int]] = [(root, 0)]
    while stack:
        node, next_child = stack.pop()
        if node.children and next_child == 0:
            parts.append("(")
        if next_child < len(node.children):
            if next_child > 0:
                parts.append(",")
            stack.append((node, next_child + 1))
            stack.append((node.children[next_child], 0))
            continue
        if node.children:
            parts.append(")")
        parts.append(_label(node, is_root=node is root))
    return "".join(parts) + ";"


def tip_names(tree: PartitionTree) -> list[str | None]:
    return [node.id for node in tree.tips()]


def count_tips(tree: PartitionTree) -> int:
    return len(tree.tips())


__all__ = ["to_newick", "tip_names", "count_tips"]
