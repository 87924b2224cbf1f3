"""Round-trip checks for simulation inputs and outputs.

``verify_from_config`` re-serialises every parsed input tree to a Newick dump
so the parser can be compared against the source file, and
``verify_alignment`` reads a written alignment back and reports its shape.
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np
from Bio import SeqIO

from coalseq.output import DEFAULT_ALPHABET, read_text_alignment
from coalseq.utils import to_newick

from .config import load_simulation_config
from .partition_reader import read_partitioned_trees


@dataclass
class AlignmentReport:
    """Summary of an alignment file read back from disk."""

    path: Path
    taxa: list[str]
    lengths: dict[str, int]
    unexpected_symbols: dict[str, set[str]] = field(default_factory=dict)

    @property
    def aligned(self) -> bool:
        return len(set(self.lengths.values())) == 1

    @property
    def ok(self) -> bool:
        return self.aligned and not self.unexpected_symbols


def verify_from_config(config_path: Path | str, *, output_path: Path | None = None) -> Path:
    """Load *config_path*, parse its input trees, and write a Newick dump."""

    config = load_simulation_config(config_path)
    settings = config.input
    trees = read_partitioned_trees(settings.tree_file, settings.partition_file, length=settings.length)

    if output_path is not None:
        destination = Path(output_path)
    else:
        destination = _default_verify_path(config.output.verify_directory(), config.output.path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    with destination.open("w", encoding="utf-8") as handle:
        for tree in trees:
            tree.build()
            handle.write(to_newick(tree))
            handle.write("\n")
    return destination


def verify_alignment(
    path: Path | str,
    format_name: str = "text",
    *,
    alphabet: Sequence[str] = DEFAULT_ALPHABET,
) -> AlignmentReport:
    """Read an alignment written by one of the output writers and check it."""
    alignment_path = Path(path)
    if not alignment_path.exists():
        raise FileNotFoundError(f"Alignment file not found: {alignment_path}")

    sequences = _read_alignment(alignment_path, format_name, tuple(alphabet))
    allowed = set(alphabet)
    unexpected = {
        taxon: set(sequence) - allowed for taxon, sequence in sequences.items() if set(sequence) - allowed
    }
    return AlignmentReport(
        path=alignment_path,
        taxa=list(sequences),
        lengths={taxon: len(sequence) for taxon, sequence in sequences.items()},
        unexpected_symbols=unexpected,
    )


def _default_verify_path(verify_directory: Path, output_path: Path) -> Path:
    return verify_directory / f"{output_path.stem}.nwk"


def _read_alignment(path: Path, format_name: str, alphabet: tuple[str, ...]) -> dict[str, str]:
    if format_name == "text":
        return read_text_alignment(path)
    if format_name == "npy":
        records = np.load(path)
        symbols = np.array(alphabet)
        return {str(record["taxon"]): "".join(symbols[record["X"].argmax(axis=1)]) for record in records}
    return {record.id: str(record.seq) for record in SeqIO.parse(str(path), format_name)}


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        required=True,
        help="Path to the simulation configuration file",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Optional destination path for the Newick dump",
    )
    parser.add_argument(
        "--check-alignment",
        action="store_true",
        help="Also read back the configured output alignment and report its shape",
    )
    return parser.parse_args()


def main() -> None:
    import time
    args = _parse_args()
    t0 = time.time()
    output_path = verify_from_config(args.config, output_path=args.output)
    print(f"Wrote Newick dump to {output_path}")
    if args.check_alignment:
        config = load_simulation_config(args.config)
        report = verify_alignment(config.output.path, config.output.format, alphabet=config.model.bases)
        status = f"aligned at {next(iter(report.lengths.values()))} sites" if report.aligned else "NOT aligned"
        print(f"{len(report.taxa)} taxa, {status}")
        if report.unexpected_symbols:
            print(f"Unexpected symbols for taxa: {', '.join(sorted(report.unexpected_symbols))}")
    t1 = time.time()
    print(f"Time taken: {t1 - t0:.2f} seconds")


if __name__ == "__main__":
    main()
