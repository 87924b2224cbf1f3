"""Shared utility helpers reused across coalseq modules."""

from .formatting import format_frequencies, format_partitions
from .phylo import count_tips, tip_names, to_newick

__all__ = [
    "count_tips",
    "tip_names",
    "to_newick",
    "format_frequencies",
    "format_partitions",
]
