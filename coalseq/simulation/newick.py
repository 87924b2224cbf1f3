"""Single-pass Newick parser building :class:`PartitionTree` topologies.

The scan keeps an explicit stack of parents under construction instead of
recursing, so deep caterpillar trees never touch the interpreter's call
stack limit.
"""

from __future__ import annotations

import enum
import logging
import math

from .errors import NewickParseError, TreeStateError
from .tree import PartitionTree, TreeNode

logger = logging.getLogger(__name__)


class _Field(enum.Enum):
    ID = "id"
    BRANCH_LENGTH = "branch_length"


def _consume(node: TreeNode, field: _Field, buffer: list[str]) -> None:
    text = "".join(buffer).strip()
    if field is _Field.ID:
        node.set_id(text)
        return
    try:
        value = float(text)
    except ValueError as exc:
        raise NewickParseError(f"Could not parse {text!r} into a branch length") from exc
    if not math.isfinite(value):
        raise NewickParseError(f"Branch length {text!r} is not a finite number")
    node.branch_length = value


def build(tree: PartitionTree) -> None:
    """Parse ``tree.raw_newick`` into ``tree.root``.

    Raises :class:`TreeStateError` when the tree was already built and
    :class:`NewickParseError` for malformed input. On success the raw string
    is cleared and ``tree.size`` holds the number of nodes created.
    """
    if tree.root is not None:
        raise TreeStateError("Tree already built")

    newick = tree.raw_newick.strip()
    if not newick.endswith(";"):
        raise NewickParseError("Incorrect Newick tree format, missing trailing ';'")

    stack: list[TreeNode] = []
    buffer: list[str] = []
    field = _Field.ID
    current = TreeNode()
    size = 0
    end = len(newick)

    for position, char in enumerate(newick):
        if char == "(":
            stack.append(current)
            current = TreeNode()
        elif char in ",)":
            if not stack:
                raise NewickParseError(
                    f"Unexpected {char!r} at position {position}; does the Newick tree have a single root node?"
                )
            _consume(current, field, buffer)
            buffer.clear()
            field = _Field.ID
            stack[-1].add_child(current)
            size += 1
            current = TreeNode() if char == "," else stack.pop()
        elif char == ":":
            _consume(current, field, buffer)
            buffer.clear()
            field = _Field.BRANCH_LENGTH
        elif char == ";":
            _consume(current, field, buffer)
            buffer.clear()
            end = position + 1
            break
        else:
            buffer.append(char)

    if end < len(newick):
        logger.warning("Newick tree string included characters after ';'. Ignoring %r", newick[end:])

    if stack:
        raise NewickParseError(f"Unbalanced parens on Newick tree ({len(stack)} group(s) left open)")

    tree.root = current
    tree.size = size + 1
    tree.raw_newick = ""


__all__ = ["build"]
