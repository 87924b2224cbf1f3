from __future__ import annotations

import numpy as np
import pytest

from coalseq.simulation import (
    HKY85,
    DuplicateTaxonError,
    PartitionFileError,
    PartitionTree,
    Sequence,
    SubstitutionModel,
    TreeStateError,
    UnnamedTipError,
    assemble,
    create_ancestral,
    evolve,
)

BASES = ("A", "G", "C", "T")
TABLE = tuple(zip(BASES, (0.25, 0.25, 0.25, 0.25)))


class RecordingModel(SubstitutionModel):
    """Copies sequences unchanged and remembers the branches it was asked to mutate."""

    def __init__(self) -> None:
        self.branches: list[float] = []

    def random_sequence(self, length, rng=None):
        return Sequence("A" * length, TABLE)

    def mutate(self, sequence, branch_length, rng=None):
        self.branches.append(branch_length)
        return Sequence(sequence.symbols, sequence.frequency_table)


@pytest.fixture
def model() -> HKY85:
    return HKY85((0.25, 0.25, 0.25, 0.25), BASES, kappa=1.0, scale=1.0)


def _built(newick: str, partition: int) -> PartitionTree:
    return PartitionTree(partition=partition, raw_newick=newick).build()


def test_two_taxon_scenario(model: HKY85) -> None:
    tree = _built("(A:0.5,B:0.5);", 10)
    rng = np.random.default_rng(0)
    create_ancestral(tree, model, rng)
    results = evolve(tree, model, rng)

    assert set(results) == {"A", "B"}
    for sequence in results.values():
        assert len(sequence) == 10
        assert set(str(sequence)) <= set(BASES)


def test_every_tip_gets_a_partition_sized_sequence(model: HKY85) -> None:
    tree = _built("((A:0.1,B:0.2):0.05,(C:0.3,(D:0.1,E:0.4):0.2):0.1,F:1.0);", 37)
    rng = np.random.default_rng(1)
    create_ancestral(tree, model, rng)
    results = evolve(tree, model, rng)

    assert list(results) == ["A", "B", "C", "D", "E", "F"]
    assert all(len(sequence) == 37 for sequence in results.values())
    assert all(node.sequence is not None for node in tree.iter_preorder())


def test_traversal_is_preorder_first_child_first() -> None:
    tree = _built("((A:1,B:2):3,C:4);", 4)
    recorder = RecordingModel()
    create_ancestral(tree, recorder)
    evolve(tree, recorder)
    assert recorder.branches == [3.0, 1.0, 2.0, 4.0]


def test_children_inherit_their_parent_sequence() -> None:
    tree = _built("((A:1,B:2):3,C:4);", 6)
    recorder = RecordingModel()
    create_ancestral(tree, recorder)
    results = evolve(tree, recorder)
    assert {taxon: str(sequence) for taxon, sequence in results.items()} == {
        "A": "AAAAAA",
        "B": "AAAAAA",
        "C": "AAAAAA",
    }


def test_zero_length_branches_copy_the_ancestral_sequence(model: HKY85) -> None:
    tree = _built("(A:0,(B:0,C:0):0);", 200)
    rng = np.random.default_rng(2)
    create_ancestral(tree, model, rng)
    ancestral = str(tree.root.sequence)
    results = evolve(tree, model, rng)
    assert all(str(sequence) == ancestral for sequence in results.values())


def test_deep_tree_evolves_without_recursion(model: HKY85) -> None:
    depth = 2000
    newick = "T0:0.001"
    for idx in range(1, depth + 1):
        newick = f"({newick},T{idx}:0.001):0.001"
    tree = _built(newick + ";", 5)
    rng = np.random.default_rng(3)
    create_ancestral(tree, model, rng)
    assert len(evolve(tree, model, rng)) == depth + 1


def test_unbuilt_tree_cannot_be_seeded_or_evolved(model: HKY85) -> None:
    tree = PartitionTree(partition=5, raw_newick="(A,B);")
    with pytest.raises(TreeStateError):
        create_ancestral(tree, model)
    with pytest.raises(TreeStateError):
        evolve(tree, model)


def test_evolving_without_ancestral_sequence_fails(model: HKY85) -> None:
    tree = _built("(A:0.1,B:0.1);", 5)
    with pytest.raises(TreeStateError, match="ancestral"):
        evolve(tree, model)


def test_unnamed_tip_is_unsupported(model: HKY85) -> None:
    tree = _built("(A:0.1,:0.1);", 5)
    create_ancestral(tree, model)
    with pytest.raises(UnnamedTipError):
        evolve(tree, model)


def test_duplicate_taxon_in_one_tree_is_rejected(model: HKY85) -> None:
    tree = _built("(A:0.1,(A:0.1,B:0.1):0.1);", 5)
    create_ancestral(tree, model)
    with pytest.raises(DuplicateTaxonError):
        evolve(tree, model)


def test_single_node_tree_returns_root_sequence(model: HKY85) -> None:
    tree = _built("A;", 8)
    create_ancestral(tree, model)
    results = evolve(tree, model)
    assert list(results) == ["A"]
    assert results["A"] is tree.root.sequence


def test_assemble_concatenates_in_partition_order() -> None:
    first = {"A": Sequence("AAAAA", TABLE), "B": Sequence("GGGGG", TABLE)}
    second = {"B": Sequence("CCC", TABLE), "A": Sequence("TTT", TABLE)}

    merged = assemble([first, second])
    assert merged == {"A": "AAAAATTT", "B": "GGGGGCCC"}
    assert list(merged) == ["A", "B"]


def test_assemble_keeps_taxa_missing_from_some_partitions() -> None:
    merged = assemble([{"A": "AG"}, {"A": "CT", "B": "GG"}])
    assert merged == {"A": "AGCT", "B": "GG"}


@pytest.mark.parametrize("partition", [0, -3, 2.5, "10", True])
def test_partition_length_must_be_a_positive_integer(partition) -> None:
    with pytest.raises(PartitionFileError):
        PartitionTree(partition=partition, raw_newick="(A:0.1,B:0.1);")


def test_tip_sequences_are_read_only(model: HKY85) -> None:
    tree = _built("((A:0.1,B:0.2):0.1,C:0.3);", 12)
    rng = np.random.default_rng(6)
    create_ancestral(tree, model, rng)
    results = evolve(tree, model, rng)

    for sequence in [tree.root.sequence, *results.values()]:
        assert not sequence.symbols.flags.writeable
        with pytest.raises(ValueError):
            sequence.symbols[0] = ord("A")
