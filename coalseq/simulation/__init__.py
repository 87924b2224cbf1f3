from __future__ import annotations

from .errors import (
    DuplicateTaxonError,
    ModelParameterError,
    NewickParseError,
    PartitionFileError,
    SimulationError,
    TreeStateError,
    UnnamedTipError,
    UnrecognizedBaseError,
)
from .evolution import assemble, create_ancestral, evolve
from .newick import build
from .partition_reader import read_partitioned_trees
from .partitioned_simulator import PartitionedSimulator, SimulationResult
from .sequence import Sequence
from .substitution import HKY85, SubstitutionModel
from .tree import PartitionTree, TreeNode


def verify_from_config(*args, **kwargs):
    from .verify import verify_from_config as _verify_from_config

    return _verify_from_config(*args, **kwargs)


def verify_alignment(*args, **kwargs):
    from .verify import verify_alignment as _verify_alignment

    return _verify_alignment(*args, **kwargs)


__all__ = [
    "HKY85",
    "PartitionTree",
    "PartitionedSimulator",
    "Sequence",
    "SimulationResult",
    "SubstitutionModel",
    "TreeNode",
    "assemble",
    "build",
    "create_ancestral",
    "evolve",
    "read_partitioned_trees",
    "verify_alignment",
    "verify_from_config",
    "DuplicateTaxonError",
    "ModelParameterError",
    "NewickParseError",
    "PartitionFileError",
    "SimulationError",
    "TreeStateError",
    "UnnamedTipError",
    "UnrecognizedBaseError",
]
