from __future__ import annotations

import math

import numpy as np
import pytest

from coalseq.simulation import HKY85, ModelParameterError, Sequence, UnrecognizedBaseError

BASES = ("A", "G", "C", "T")


def _model(frequencies=(0.25, 0.25, 0.25, 0.25), kappa: float = 1.0, scale: float = 1.0) -> HKY85:
    return HKY85(frequencies, BASES, kappa=kappa, scale=scale)


def test_beta_normalises_mean_rate() -> None:
    pa, pg, pc, pt = 0.1, 0.2, 0.3, 0.4
    model = _model((pa, pg, pc, pt), kappa=2.5)
    expected = 1.0 / (2 * (pa + pg) * (pc + pt) + 2 * 2.5 * (pa * pg + pc * pt))
    assert model.beta == pytest.approx(expected)


@pytest.mark.parametrize("frequencies", [(0.25, 0.25, 0.25, 0.25), (0.1, 0.2, 0.3, 0.4), (0.4, 0.05, 0.05, 0.5)])
@pytest.mark.parametrize("kappa", [0.0, 1.0, 4.0, 25.0])
@pytest.mark.parametrize("branch_length", [0.0, 1e-6, 0.01, 0.5, 2.0, 50.0])
def test_transition_matrix_rows_are_stochastic(frequencies, kappa: float, branch_length: float) -> None:
    matrix = _model(frequencies, kappa=kappa, scale=1.5).transition_matrix(branch_length)
    assert matrix.shape == (4, 4)
    np.testing.assert_allclose(matrix.sum(axis=1), np.ones(4), atol=1e-9)
    assert (matrix > -1e-12).all()


def test_transition_matrix_is_identity_at_zero_length() -> None:
    np.testing.assert_allclose(_model((0.1, 0.2, 0.3, 0.4), kappa=3.0).transition_matrix(0.0), np.eye(4), atol=1e-12)


def test_transition_matrix_approaches_stationary_distribution() -> None:
    frequencies = (0.1, 0.2, 0.3, 0.4)
    matrix = _model(frequencies, kappa=2.0).transition_matrix(1e3)
    for row in matrix:
        np.testing.assert_allclose(row, frequencies, atol=1e-9)


def test_equal_frequencies_and_unit_kappa_match_jukes_cantor() -> None:
    v = 0.5
    matrix = _model().transition_matrix(v)
    same = 0.25 + 0.75 * math.exp(-4.0 * v / 3.0)
    different = 0.25 - 0.25 * math.exp(-4.0 * v / 3.0)
    np.testing.assert_allclose(np.diag(matrix), [same] * 4)
    off_diagonal = matrix[~np.eye(4, dtype=bool)]
    np.testing.assert_allclose(off_diagonal, [different] * 12)


def test_scale_multiplies_branch_length() -> None:
    assert np.allclose(_model(scale=2.0).transition_matrix(0.25), _model(scale=1.0).transition_matrix(0.5))


def test_random_sequence_follows_stationary_frequencies() -> None:
    frequencies = (0.1, 0.2, 0.3, 0.4)
    sequence = _model(frequencies).random_sequence(200_000, np.random.default_rng(1))
    text = str(sequence)
    assert len(sequence) == 200_000
    for base, expected in zip(BASES, frequencies):
        assert text.count(base) / len(text) == pytest.approx(expected, abs=0.01)


def test_unnormalised_weights_are_sampled_proportionally() -> None:
    sequence = Sequence.random([("A", 1.0), ("G", 1.0), ("C", 2.0), ("T", 4.0)], 80_000, np.random.default_rng(2))
    text = str(sequence)
    assert text.count("T") / len(text) == pytest.approx(0.5, abs=0.01)
    assert text.count("A") / len(text) == pytest.approx(0.125, abs=0.01)


def test_mutated_symbols_stay_in_alphabet() -> None:
    rng = np.random.default_rng(3)
    model = _model((0.1, 0.2, 0.3, 0.4), kappa=5.0)
    parent = model.random_sequence(5_000, rng)
    for branch_length in (0.0, 0.1, 1.0, 10.0):
        child = model.mutate(parent, branch_length, rng)
        assert len(child) == len(parent)
        assert set(str(child)) <= set(BASES)
        assert child.frequency_table == parent.frequency_table


def test_mutate_returns_new_sequence_without_touching_parent() -> None:
    rng = np.random.default_rng(4)
    model = _model()
    parent = model.random_sequence(1_000, rng)
    before = str(parent)
    child = model.mutate(parent, 5.0, rng)
    assert child is not parent
    assert str(parent) == before
    assert str(child) != before


def test_tiny_branch_length_keeps_almost_every_site() -> None:
    rng = np.random.default_rng(5)
    model = _model((0.1, 0.2, 0.3, 0.4), kappa=2.0)
    parent = model.random_sequence(100_000, rng)
    child = model.mutate(parent, 1e-6, rng)
    unchanged = np.mean(parent.symbols == child.symbols)
    assert unchanged >= 0.999


def test_observed_substitution_rate_matches_closed_form() -> None:
    rng = np.random.default_rng(6)
    model = _model()
    parent = model.random_sequence(200_000, rng)
    child = model.mutate(parent, 0.5, rng)
    observed = np.mean(parent.symbols != child.symbols)
    assert observed == pytest.approx(0.75 * (1.0 - math.exp(-2.0 / 3.0)), abs=0.01)


def test_seeded_generators_reproduce_mutations() -> None:
    model = _model((0.1, 0.2, 0.3, 0.4), kappa=2.0)
    parent = model.random_sequence(500, np.random.default_rng(7))
    first = model.mutate(parent, 0.3, np.random.default_rng(8))
    second = model.mutate(parent, 0.3, np.random.default_rng(8))
    assert first == second


def test_unrecognized_base_is_rejected() -> None:
    foreign = Sequence("ACGU", [("A", 0.25), ("C", 0.25), ("G", 0.25), ("U", 0.25)])
    with pytest.raises(UnrecognizedBaseError, match="'U'"):
        _model().mutate(foreign, 0.1)


def test_sampling_falls_back_to_last_symbol(monkeypatch: pytest.MonkeyPatch) -> None:
    model = _model()
    monkeypatch.setattr(HKY85, "transition_matrix", lambda self, branch_length: np.zeros((4, 4)))
    child = model.mutate(Sequence("AGCTAGCT", model.frequency_table), 0.1, np.random.default_rng(9))
    assert str(child) == "T" * 8


@pytest.mark.parametrize(
    ("frequencies", "bases", "kappa", "scale"),
    [
        ((0.25, 0.25, 0.25, 0.0), BASES, 1.0, 1.0),
        ((0.25, 0.25, 0.25, -0.1), BASES, 1.0, 1.0),
        ((0.25, 0.25, 0.5), BASES, 1.0, 1.0),
        ((0.25, 0.25, 0.25, 0.25), ("A", "G", "C", "C"), 1.0, 1.0),
        ((0.25, 0.25, 0.25, 0.25), ("A", "G", "C", "TT"), 1.0, 1.0),
        ((0.25, 0.25, 0.25, 0.25), BASES, -1.0, 1.0),
        ((0.25, 0.25, 0.25, 0.25), BASES, 1.0, 0.0),
    ],
)
def test_invalid_model_parameters(frequencies, bases, kappa: float, scale: float) -> None:
    with pytest.raises(ModelParameterError):
        HKY85(frequencies, bases, kappa=kappa, scale=scale)


@pytest.mark.parametrize("branch_length", [-0.1, math.nan, math.inf])
def test_invalid_branch_lengths_are_rejected(branch_length: float) -> None:
    with pytest.raises(ModelParameterError):
        _model().transition_matrix(branch_length)


def test_nan_branch_length_never_reaches_sampling() -> None:
    parent = _model().random_sequence(50, np.random.default_rng(4))
    with pytest.raises(ModelParameterError):
        _model().mutate(parent, math.nan, np.random.default_rng(5))


def test_sequence_extend_appends_sites() -> None:
    rng = np.random.default_rng(10)
    sequence = Sequence("", [("A", 0.25), ("G", 0.25), ("C", 0.25), ("T", 0.25)])
    sequence.extend(7, rng)
    sequence.extend(3, rng)
    assert len(sequence) == 10
    assert set(str(sequence)) <= set(BASES)


def test_sequence_rejects_symbols_outside_its_table() -> None:
    with pytest.raises(UnrecognizedBaseError):
        Sequence("ACGN", [("A", 0.25), ("G", 0.25), ("C", 0.25), ("T", 0.25)])
