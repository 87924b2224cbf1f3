from __future__ import annotations

import logging
import multiprocessing as mp
import random
from collections.abc import Iterable, Sequence as SequenceABC
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from coalseq.output import alignment_length, get_writer

from .config import SimulationConfig
from .errors import SimulationError
from .evolution import assemble, create_ancestral, evolve
from .partition_reader import read_partitioned_trees
from .sequence import Sequence
from .substitution import SubstitutionModel
from .tree import PartitionTree

logger = logging.getLogger(__name__)


@dataclass
class SimulationResult:
    """Concatenated taxon sequences plus the partition layout they were built from."""

    sequences: dict[str, str]
    partitions: list[int] = field(default_factory=list)

    @property
    def aligned(self) -> bool:
        return alignment_length(self.sequences) is not None

    @property
    def total_length(self) -> int:
        return sum(self.partitions)


class PartitionedSimulator:
    """Evolve sequences over many independent trees and merge them per taxon."""

    def __init__(self, config: SimulationConfig, model: SubstitutionModel | None = None) -> None:
        self.config = config
        self._rng = random.Random(config.seed)
        self.parallel_cores = max(1, config.parallel_cores)
        self.model = model if model is not None else config.model.build()

    @classmethod
    def from_config_file(cls, config_path: Path | str) -> "PartitionedSimulator":
        from .config import load_simulation_config

        config = load_simulation_config(config_path)
        return cls(config)

    def read_trees(self) -> list[PartitionTree]:
        settings = self.config.input
        return read_partitioned_trees(settings.tree_file, settings.partition_file, length=settings.length)

    def simulate_partitions(self, trees: SequenceABC[PartitionTree]) -> list[dict[str, Sequence]]:
        """Run ancestral creation and evolution for every tree, results in tree order."""
        seeds = [self._rng.randint(0, 2**32 - 1) for _ in range(len(trees))]
        logger.info(
            "Simulating %d trees covering %d bases on %d worker(s)",
            len(trees),
            sum(tree.partition for tree in trees),
            self.parallel_cores,
        )

        payloads: Iterable[tuple[int, PartitionTree, SubstitutionModel, int]] = (
            (index, tree, self.model, seed) for index, (tree, seed) in enumerate(zip(trees, seeds))
        )

        results: list[dict[str, Sequence]] = []
        if self.parallel_cores <= 1 or len(trees) <= 1:
            for tree_results in map(_simulate_partition_worker, payloads):
                results.append(tree_results)
        else:
            ctx = mp.get_context("spawn")
            with ctx.Pool(processes=self.parallel_cores) as pool:
                for tree_results in pool.imap(_simulate_partition_worker, payloads):
                    results.append(tree_results)
        return results

    def simulate(self, trees: SequenceABC[PartitionTree] | None = None) -> SimulationResult:
        selected = list(trees) if trees is not None else self.read_trees()
        per_tree = self.simulate_partitions(selected)
        logger.info("Assembling %d partitions", len(per_tree))
        return SimulationResult(
            sequences=assemble(per_tree),
            partitions=[tree.partition for tree in selected],
        )

    def write_output(self, result: SimulationResult | None = None) -> Path:
        outcome = result if result is not None else self.simulate()
        settings = self.config.output
        settings.ensure_directory()
        writer = get_writer(
            settings.format,
            settings.path,
            alphabet=self.config.model.bases,
            parallel_cores=self.parallel_cores,
        )
        logger.info("Writing %d sequences to %s", len(outcome.sequences), settings.path)
        return writer.write(outcome.sequences)


__all__ = ["PartitionedSimulator", "SimulationResult"]


def _simulate_partition_worker(
    payload: tuple[int, PartitionTree, SubstitutionModel, int],
) -> dict[str, Sequence]:
    index, tree, model, seed = payload
    rng = np.random.default_rng(seed)
    try:
        if not tree.is_built:
            tree.build()
        create_ancestral(tree, model, rng)
        return evolve(tree, model, rng)
    except SimulationError as exc:
        raise type(exc)(f"Tree {index + 1}: {exc}") from exc
