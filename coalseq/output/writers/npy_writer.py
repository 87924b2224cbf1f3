from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from multiprocessing.pool import ThreadPool
from pathlib import Path

import numpy as np

from ..base import alignment_length, one_hot_encode
from .base import AlignmentWriter


class NpyAlignmentWriter(AlignmentWriter):
    """Writes the alignment as a structured NumPy .npy file of one-hot encoded rows.

    Each record holds a ``taxon`` name and an ``X`` matrix of shape
    ``(sites, len(alphabet))`` whose channels follow the configured alphabet.
    """

    format_name = "npy"

    def write(self, sequences: Mapping[str, str]) -> Path:
        if not sequences:
            raise ValueError("No sequences to write")
        seq_length = alignment_length(sequences)
        if seq_length is None:
            raise ValueError("NPY output requires sequences of equal length for every taxon")

        output_path = self._prepare_path()
        if output_path.exists():
            output_path.unlink()

        taxa = list(sequences)
        name_width = max(len(taxon) for taxon in taxa)
        dtype = np.dtype(
            [
                ("taxon", f"U{name_width}"),
                ("X", np.uint8, (seq_length, len(self.alphabet))),
            ]
        )

        dataset = np.lib.format.open_memmap(
            output_path,
            mode="w+",
            dtype=dtype,
            shape=(len(taxa),),
        )

        jobs: Iterable[tuple[int, str, int, tuple[str, ...]]] = (
            (row_index, sequences[taxon], seq_length, self.alphabet) for row_index, taxon in enumerate(taxa)
        )

        try:
            if self.parallel_cores <= 1:
                for row_index, encoded in map(_encode_row, jobs):
                    dataset["taxon"][row_index] = taxa[row_index]
                    dataset["X"][row_index] = encoded
            else:
                with ThreadPool(processes=self.parallel_cores) as pool:
                    for row_index, encoded in pool.imap(_encode_row, jobs):
                        dataset["taxon"][row_index] = taxa[row_index]
                        dataset["X"][row_index] = encoded
        finally:
            dataset.flush()
            del dataset

        return output_path


def _encode_row(payload: tuple[int, str, int, Sequence[str]]) -> tuple[int, np.ndarray]:
    row_index, sequence, seq_length, alphabet = payload
    return row_index, one_hot_encode(sequence, seq_length, alphabet)
