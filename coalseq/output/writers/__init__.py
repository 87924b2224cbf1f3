from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from .base import AlignmentWriter
from .npy_writer import NpyAlignmentWriter
from .seqio_writer import SeqIOAlignmentWriter
from .text_writer import TextAlignmentWriter, read_text_alignment

WRITER_FORMATS: tuple[str, ...] = ("text", "fasta", "phylip-relaxed", "nexus", "npy")


def get_writer(
    format_name: str,
    output_path: Path | str,
    *,
    alphabet: Sequence[str] | None = None,
    parallel_cores: int = 1,
) -> AlignmentWriter:
    """Return the writer registered for ``format_name``."""
    kwargs = {"parallel_cores": parallel_cores}
    if alphabet is not None:
        kwargs["alphabet"] = alphabet
    if format_name == "text":
        return TextAlignmentWriter(output_path, **kwargs)
    if format_name == "npy":
        return NpyAlignmentWriter(output_path, **kwargs)
    if format_name in WRITER_FORMATS:
        return SeqIOAlignmentWriter(output_path, format_name, **kwargs)
    raise ValueError(f"Unsupported output format '{format_name}'")


__all__ = [
    "AlignmentWriter",
    "NpyAlignmentWriter",
    "SeqIOAlignmentWriter",
    "TextAlignmentWriter",
    "WRITER_FORMATS",
    "get_writer",
    "read_text_alignment",
]
