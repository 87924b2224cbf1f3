from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from .base import AlignmentWriter


class TextAlignmentWriter(AlignmentWriter):
    """Writes one ``<taxon> <sequence>`` pair per line."""

    format_name = "text"

    def write(self, sequences: Mapping[str, str]) -> Path:
        output_path = self._prepare_path()
        with output_path.open("w", encoding="utf-8") as handle:
            for taxon, sequence in sequences.items():
                handle.write(f"{taxon} {sequence}\n")
        return output_path


def read_text_alignment(path: Path | str) -> dict[str, str]:
    sequences: dict[str, str] = {}
    with Path(path).open("r", encoding="utf-8") as handle:
        for line_number, line in enumerate(handle, start=1):
            line = line.strip()
            if not line:
                continue
            taxon, sep, sequence = line.partition(" ")
            if not sep:
                raise ValueError(f"Line {line_number} of {path} is not an 'id sequence' pair")
            sequences[taxon] = sequence.strip()
    return sequences
