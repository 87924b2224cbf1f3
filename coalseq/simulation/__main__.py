from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from coalseq.utils import format_frequencies, format_partitions

from .config import OUTPUT_FORMATS, SimulationConfig, read_config_mapping
from .partitioned_simulator import PartitionedSimulator


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Simulate nucleotide sequences along coalescent trees under the HKY85 model.",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Optional YAML/JSON configuration file; command line values override it",
    )
    parser.add_argument("--treefile", "-t", type=Path, help="File with input coalescent tree(s), one Newick per line")
    parser.add_argument("--partitions", "-p", type=Path, help="File with one partition length per tree")
    parser.add_argument("--length", "-l", type=int, help="Partition length used for every tree")
    parser.add_argument("--outfile", "-o", type=Path, help="Output filename")
    parser.add_argument("--format", choices=OUTPUT_FORMATS, help="Output format (default: text)")
    parser.add_argument("--scale", "-s", type=float, help="Branch scaling factor")
    parser.add_argument("--kappa", type=float, help="Transition/transversion rate ratio")
    parser.add_argument("--threads", type=int, help="Maximum number of worker processes")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible runs")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log progress messages")
    return parser.parse_args(argv)


def build_payload(args: argparse.Namespace) -> tuple[dict[str, Any], Path | None]:
    """Merge the optional config file with command line overrides."""
    payload: dict[str, Any] = {}
    base_path: Path | None = None
    if args.config is not None:
        payload = read_config_mapping(args.config)
        base_path = args.config.parent

    model = dict(payload.get("model") or {})
    inputs = dict(payload.get("input") or {})
    output = dict(payload.get("output") or {})

    if args.treefile is not None:
        inputs["tree_file"] = str(args.treefile.resolve())
    if args.partitions is not None:
        inputs["partition_file"] = str(args.partitions.resolve())
    if args.length is not None:
        inputs["length"] = args.length
    if args.outfile is not None:
        output["path"] = str(args.outfile.resolve())
    if args.format is not None:
        output["format"] = args.format
    if args.scale is not None:
        model["scale"] = args.scale
    if args.kappa is not None:
        model["kappa"] = args.kappa
    if args.threads is not None:
        payload["parallel_cores"] = args.threads
    if args.seed is not None:
        payload["seed"] = args.seed

    payload.update({"model": model, "input": inputs, "output": output})
    return payload, base_path


def main(argv: Sequence[str] | None = None) -> None:
    import time
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    payload, base_path = build_payload(args)
    config = SimulationConfig.from_mapping(payload, base_path=base_path)
    simulator = PartitionedSimulator(config)
    t0 = time.time()
    result = simulator.simulate()
    output_path = simulator.write_output(result)
    t1 = time.time()
    print(
        f"Simulated {len(result.sequences)} taxa over {format_partitions(result.partitions)}"
        f" (HKY85 {format_frequencies(config.model.bases, config.model.frequencies)},"
        f" kappa={config.model.kappa:g}, scale={config.model.scale:g}) -> {output_path}"
    )
    print(f"Time taken: {t1 - t0:.2f} seconds")


if __name__ == "__main__":
    main()
