from __future__ import annotations

from collections.abc import Iterable, Mapping

import numpy as np

from .errors import DuplicateTaxonError, TreeStateError, UnnamedTipError
from .sequence import Sequence
from .substitution import SubstitutionModel
from .tree import PartitionTree, TreeNode


def create_ancestral(
    tree: PartitionTree,
    model: SubstitutionModel,
    rng: np.random.Generator | None = None,
) -> None:
    """Seed the root of ``tree`` with a random sequence of ``tree.partition`` sites."""
    if tree.root is None:
        raise TreeStateError("Can't create ancestral for an empty tree")
    tree.root.sequence = model.random_sequence(tree.partition, rng)


def evolve(
    tree: PartitionTree,
    model: SubstitutionModel,
    rng: np.random.Generator | None = None,
) -> dict[str, Sequence]:
    """Mutate the ancestral sequence down every branch and collect tip sequences.

    The traversal is a pre-order DFS over an explicit work list; every node is
    mutated from its parent's sequence before any of its own children are
    visited. Children are pushed last to first so the leftmost child is
    evolved first.
    """
    if tree.root is None:
        raise TreeStateError("Can't evolve an empty tree")

    results: dict[str, Sequence] = {}
    stack: list[tuple[TreeNode, Sequence | None]] = [(tree.root, None)]

    while stack:
        node, parent_sequence = stack.pop()

        if parent_sequence is not None:
            node.sequence = model.mutate(parent_sequence, node.branch_length, rng)
        elif node.sequence is None:
            raise TreeStateError("Can't evolve a tree with no ancestral sequence")

        if node.is_tip:
            if node.id is None:
                raise UnnamedTipError("Currently, only named tip nodes are supported for evolution")
            if node.id in results:
                raise DuplicateTaxonError(f"Taxon {node.id!r} appears on more than one tip of the same tree")
            results[node.id] = node.sequence
            continue

        for child in reversed(node.children):
            stack.append((child, node.sequence))

    return results


def assemble(results: Iterable[Mapping[str, Sequence | str]]) -> dict[str, str]:
    """Concatenate per-tree tip sequences per taxon, in the order the trees are given."""
    pieces: dict[str, list[str]] = {}
    for tree_results in results:
        for taxon, sequence in tree_results.items():
            pieces.setdefault(taxon, []).append(str(sequence))
    return {taxon: "".join(parts) for taxon, parts in pieces.items()}


__all__ = ["create_ancestral", "evolve", "assemble"]
