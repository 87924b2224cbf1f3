from __future__ import annotations

from .base import DEFAULT_ALPHABET, alignment_length, one_hot_encode
from .writers import (
    AlignmentWriter,
    NpyAlignmentWriter,
    SeqIOAlignmentWriter,
    TextAlignmentWriter,
    get_writer,
    read_text_alignment,
)

__all__ = [
    "DEFAULT_ALPHABET",
    "alignment_length",
    "one_hot_encode",
    "AlignmentWriter",
    "NpyAlignmentWriter",
    "SeqIOAlignmentWriter",
    "TextAlignmentWriter",
    "get_writer",
    "read_text_alignment",
]
