from __future__ import annotations

from collections.abc import Sequence


def format_frequencies(bases: Sequence[str], frequencies: Sequence[float]) -> str:
    """Render ``base=frequency`` pairs for log and summary lines."""
    return ", ".join(f"{base}={frequency:g}" for base, frequency in zip(bases, frequencies))


def format_partitions(partitions: Sequence[int]) -> str:
    """Short description of a partition layout, e.g. ``3 partitions / 1500 sites``."""
    noun = "partition" if len(partitions) == 1 else "partitions"
    return f"{len(partitions)} {noun} / {sum(partitions)} sites"


__all__ = ["format_frequencies", "format_partitions"]
