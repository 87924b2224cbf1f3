"""Convenience exports for the coalseq package."""

from .simulation import HKY85, PartitionedSimulator, PartitionTree, SimulationResult

__all__ = ["HKY85", "PartitionedSimulator", "PartitionTree", "SimulationResult"]
