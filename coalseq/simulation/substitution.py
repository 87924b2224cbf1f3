"""Nucleotide substitution models used to draw and mutate sequences."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Sequence as SequenceABC

import numpy as np

from .errors import ModelParameterError, UnrecognizedBaseError
from .sequence import FrequencyTable, Sequence, normalize_frequency_table


class SubstitutionModel(ABC):
    """Capability shared by every model the evolution engine can drive."""

    @abstractmethod
    def random_sequence(self, length: int, rng: np.random.Generator | None = None) -> Sequence:
        """Draw an ancestral sequence of ``length`` sites from the stationary distribution."""
        raise NotImplementedError

    @abstractmethod
    def mutate(
        self,
        sequence: Sequence,
        branch_length: float,
        rng: np.random.Generator | None = None,
    ) -> Sequence:
        """Return a new sequence evolved from ``sequence`` along a branch of ``branch_length``."""
        raise NotImplementedError


class HKY85(SubstitutionModel):
    """Hasegawa-Kishino-Yano (1985) model over the ordered alphabet A, G, C, T.

    Parameters
    ----------
    frequencies:
        Stationary frequencies ``(pA, pG, pC, pT)``; each must be positive.
    bases:
        The four symbols standing for A, G, C and T, in that order. The first
        two are treated as purines and the last two as pyrimidines.
    kappa:
        Transition/transversion rate ratio (``>= 0``).
    scale:
        Multiplier applied to every branch length (``> 0``).
    """

    def __init__(
        self,
        frequencies: SequenceABC[float],
        bases: SequenceABC[str],
        kappa: float,
        scale: float,
    ) -> None:
        if len(frequencies) != 4 or len(bases) != 4:
            raise ModelParameterError("HKY85 requires exactly four frequencies and four bases")
        self.frequency_table: FrequencyTable = normalize_frequency_table(zip(bases, frequencies))
        self.kappa = float(kappa)
        self.scale = float(scale)
        if not self.kappa >= 0.0:
            raise ModelParameterError(f"kappa must be >= 0, got {kappa}")
        if not self.scale > 0.0:
            raise ModelParameterError(f"Branch length scale must be > 0, got {scale}")

        pa, pg, pc, pt = self.frequencies
        self.beta = 1.0 / (2.0 * (pa + pg) * (pc + pt) + 2.0 * self.kappa * (pa * pg + pc * pt))

        self._codes = np.frombuffer("".join(self.bases).encode("ascii"), dtype=np.uint8)
        self._rows = np.full(256, -1, dtype=np.intp)
        self._rows[self._codes] = np.arange(4)

    @property
    def frequencies(self) -> tuple[float, float, float, float]:
        return tuple(weight for _, weight in self.frequency_table)  # type: ignore[return-value]

    @property
    def bases(self) -> tuple[str, str, str, str]:
        return tuple(symbol for symbol, _ in self.frequency_table)  # type: ignore[return-value]

    def transition_matrix(self, branch_length: float) -> np.ndarray:
        """Transition probabilities after ``branch_length * scale``, rows and columns in A, G, C, T order."""
        if not 0 <= branch_length < math.inf:
            raise ModelParameterError(f"Branch lengths must be finite and non-negative, got {branch_length}")
        pa, pg, pc, pt = self.frequencies
        b = self.beta
        k = self.kappa
        v = branch_length * self.scale
        purines = pa + pg
        pyrimidines = pc + pt

        decay = math.exp(-b * v)
        ag_ts_c = purines + pyrimidines * decay
        ag_ts_e = math.exp(-(1.0 + purines * (k - 1.0)) * b * v)
        ct_ts_c = pyrimidines + purines * decay
        ct_ts_e = math.exp(-(1.0 + pyrimidines * (k - 1.0)) * b * v)
        tv_c = 1.0 - decay

        return np.array(
            [
                [
                    (pa * ag_ts_c + pg * ag_ts_e) / purines,
                    (pg * ag_ts_c - pg * ag_ts_e) / purines,
                    pc * tv_c,
                    pt * tv_c,
                ],
                [
                    (pa * ag_ts_c - pa * ag_ts_e) / purines,
                    (pg * ag_ts_c + pa * ag_ts_e) / purines,
                    pc * tv_c,
                    pt * tv_c,
                ],
                [
                    pa * tv_c,
                    pg * tv_c,
                    (pc * ct_ts_c + pt * ct_ts_e) / pyrimidines,
                    (pt * ct_ts_c - pt * ct_ts_e) / pyrimidines,
                ],
                [
                    pa * tv_c,
                    pg * tv_c,
                    (pc * ct_ts_c - pc * ct_ts_e) / pyrimidines,
                    (pt * ct_ts_c + pc * ct_ts_e) / pyrimidines,
                ],
            ],
            dtype=np.float64,
        )

    def random_sequence(self, length: int, rng: np.random.Generator | None = None) -> Sequence:
        return Sequence.random(self.frequency_table, length, rng)

    def mutate(
        self,
        sequence: Sequence,
        branch_length: float,
        rng: np.random.Generator | None = None,
    ) -> Sequence:
        rows = self._rows[sequence.symbols]
        unknown = rows < 0
        if unknown.any():
            bad = chr(int(sequence.symbols[np.argmax(unknown)]))
            raise UnrecognizedBaseError(f"Unrecognized base {bad!r} in Sequence being mutated")

        generator = rng if rng is not None else np.random.default_rng()
        cumulative = np.cumsum(self.transition_matrix(branch_length), axis=1)
        draws = generator.random(len(sequence))
        # Row-wise walk: count the running totals each draw has already passed.
        chosen = (draws[:, np.newaxis] >= cumulative[rows]).sum(axis=1)
        np.minimum(chosen, 3, out=chosen)
        return Sequence(self._codes[chosen], sequence.frequency_table)

    def __repr__(self) -> str:
        return (
            f"HKY85(frequencies={self.frequencies}, bases={self.bases}, "
            f"kappa={self.kappa}, scale={self.scale})"
        )


__all__ = ["SubstitutionModel", "HKY85"]
