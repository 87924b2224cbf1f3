from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from .errors import PartitionFileError
from .sequence import Sequence


@dataclass(eq=False)
class TreeNode:
    """One node of a partition tree; each node owns its children."""

    children: list[TreeNode] = field(default_factory=list)
    id: str | None = None
    branch_length: float = 0.0
    sequence: Sequence | None = None

    @property
    def is_tip(self) -> bool:
        return not self.children

    def set_id(self, value: str) -> None:
        self.id = value if value else None

    def add_child(self, child: TreeNode) -> None:
        self.children.append(child)


@dataclass(eq=False)
class PartitionTree:
    """A Newick tree paired with the number of sites simulated on it."""

    partition: int
    raw_newick: str
    root: TreeNode | None = None
    size: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.partition, bool) or not isinstance(self.partition, int):
            raise PartitionFileError(f"Partition length must be an integer, got {self.partition!r}")
        if self.partition <= 0:
            raise PartitionFileError(f"Partition length must be positive, got {self.partition}")

    @property
    def is_built(self) -> bool:
        return self.root is not None

    def build(self) -> "PartitionTree":
        from .newick import build

        build(self)
        return self

    def iter_preorder(self) -> Iterator[TreeNode]:
        """Yield nodes root first, children left to right, without recursion."""
        if self.root is None:
            return
        stack = [self.root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def tips(self) -> list[TreeNode]:
        return [node for node in self.iter_preorder() if node.is_tip]


__all__ = ["TreeNode", "PartitionTree"]
