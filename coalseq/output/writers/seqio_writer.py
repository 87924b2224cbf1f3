from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from Bio import SeqIO
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

from ..base import alignment_length
from .base import AlignmentWriter

# Formats Biopython can only write for equal-length records.
ALIGNED_FORMATS: frozenset[str] = frozenset({"phylip-relaxed", "nexus"})


class SeqIOAlignmentWriter(AlignmentWriter):
    """Writes sequences through :func:`Bio.SeqIO.write` (FASTA, relaxed PHYLIP, NEXUS)."""

    def __init__(self, output_path: Path | str, format_name: str = "fasta", **kwargs) -> None:
        super().__init__(output_path, **kwargs)
        self.format_name = format_name

    def write(self, sequences: Mapping[str, str]) -> Path:
        if self.format_name in ALIGNED_FORMATS and alignment_length(sequences) is None:
            raise ValueError(f"{self.format_name} output requires sequences of equal length for every taxon")

        output_path = self._prepare_path()
        records = [
            SeqRecord(Seq(sequence), id=taxon, name=taxon, description="", annotations={"molecule_type": "DNA"})
            for taxon, sequence in sequences.items()
        ]
        with output_path.open("w", encoding="utf-8") as handle:
            SeqIO.write(records, handle, self.format_name)
        return output_path
