"""Exception types raised while reading, building, and evolving partition trees."""

from __future__ import annotations


class SimulationError(Exception):
    """Base class for every error raised by the simulation core."""


class NewickParseError(SimulationError, ValueError):
    """A Newick string could not be turned into a tree."""


class PartitionFileError(SimulationError, ValueError):
    """Tree and partition inputs are inconsistent or unreadable."""


class TreeStateError(SimulationError, RuntimeError):
    """A tree was used in the wrong lifecycle state (built twice, evolved before building...)."""


class UnrecognizedBaseError(SimulationError, ValueError):
    """A sequence holds a symbol the active substitution model does not know."""


class UnnamedTipError(SimulationError):
    """Evolution reached a tip node without a taxon id."""


class DuplicateTaxonError(SimulationError):
    """Two tips of the same tree carry the same taxon id."""


class ModelParameterError(SimulationError, ValueError):
    """Substitution model or frequency table parameters are invalid."""


__all__ = [
    "SimulationError",
    "NewickParseError",
    "PartitionFileError",
    "TreeStateError",
    "UnrecognizedBaseError",
    "UnnamedTipError",
    "DuplicateTaxonError",
    "ModelParameterError",
]
