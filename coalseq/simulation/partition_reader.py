from __future__ import annotations

import logging
from pathlib import Path

from .errors import NewickParseError, PartitionFileError
from .tree import PartitionTree

logger = logging.getLogger(__name__)


def _read_lines(path: Path | str) -> list[str]:
    with Path(path).open("r", encoding="utf-8") as handle:
        return [line.strip() for line in handle if line.strip()]


def _parse_partition(value: str, line_number: int) -> int:
    try:
        partition = int(value)
    except ValueError as exc:
        raise PartitionFileError(f"Could not parse partition {value!r} (line {line_number}) into a number") from exc
    if partition <= 0:
        raise PartitionFileError(f"Partition lengths must be positive, got {partition} (line {line_number})")
    return partition


def read_partitioned_trees(
    tree_path: Path | str,
    partition_path: Path | str | None = None,
    *,
    length: int | None = None,
) -> list[PartitionTree]:
    """Pair every Newick line of ``tree_path`` with its partition length.

    Partition lengths come from ``partition_path`` (one integer per line) or,
    when no partition file is given, ``length`` is used for every tree. The
    returned trees are not built yet.
    """
    tree_lines = _read_lines(tree_path)

    if partition_path is not None:
        partition_lines = _read_lines(partition_path)
        if len(partition_lines) != len(tree_lines):
            raise PartitionFileError(
                f"Tree file has {len(tree_lines)} trees but partition file has {len(partition_lines)} lengths"
            )
        partitions = [_parse_partition(value, idx) for idx, value in enumerate(partition_lines, start=1)]
    elif length is not None:
        if length <= 0:
            raise PartitionFileError(f"Sequence length must be positive, got {length}")
        partitions = [length] * len(tree_lines)
    else:
        raise PartitionFileError("Either a partition file or a sequence length is required")

    trees: list[PartitionTree] = []
    for idx, (newick, partition) in enumerate(zip(tree_lines, partitions), start=1):
        if not newick.endswith(";"):
            raise NewickParseError(f"Incorrect Newick tree format on line {idx}, missing trailing ';'")
        trees.append(PartitionTree(partition=partition, raw_newick=newick))

    logger.info("Read %d trees covering %d bases", len(trees), sum(partitions))
    return trees


__all__ = ["read_partitioned_trees"]
