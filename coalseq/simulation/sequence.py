from __future__ import annotations

from collections.abc import Iterable, Sequence as SequenceABC

import numpy as np

from .errors import ModelParameterError, UnrecognizedBaseError

FrequencyTable = tuple[tuple[str, float], ...]


def normalize_frequency_table(table: Iterable[tuple[str, float]]) -> FrequencyTable:
    """Validate ``(symbol, weight)`` pairs and return them as an immutable table.

    Weights only need to be positive; sampling compares draws against their
    cumulative sum so they are never rescaled to probabilities.
    """
    entries: list[tuple[str, float]] = []
    seen: set[str] = set()
    for symbol, weight in table:
        symbol = str(symbol)
        if len(symbol) != 1 or not symbol.isascii():
            raise ModelParameterError(f"Sequence symbols must be single ASCII characters, got {symbol!r}")
        if symbol in seen:
            raise ModelParameterError(f"Duplicate symbol {symbol!r} in frequency table")
        weight = float(weight)
        if not weight > 0.0:
            raise ModelParameterError(f"Can't have nucleotide frequencies <= 0 (symbol {symbol!r}: {weight})")
        seen.add(symbol)
        entries.append((symbol, weight))
    if not entries:
        raise ModelParameterError("Empty frequency table")
    return tuple(entries)


def sample_indices(
    cumulative: np.ndarray,
    draws: np.ndarray,
) -> np.ndarray:
    """Cumulative-weight selection for each draw, clamped to the last candidate.

    Selecting the first entry whose running total exceeds the draw is the same
    walk as subtracting weights one by one until the draw falls below the
    current weight. Rounding can leave a draw above the final total; such
    draws fall back to the last entry.
    """
    indices = np.searchsorted(cumulative, draws, side="right")
    np.minimum(indices, cumulative.shape[-1] - 1, out=indices)
    return indices


class Sequence:
    """Nucleotide symbols plus the stationary frequency table they were drawn from."""

    __slots__ = ("symbols", "frequency_table")

    def __init__(
        self,
        symbols: np.ndarray | bytes | str | SequenceABC[str],
        frequency_table: Iterable[tuple[str, float]],
    ) -> None:
        self.frequency_table = normalize_frequency_table(frequency_table)
        self.symbols = _as_symbol_array(symbols)
        unknown = ~np.isin(self.symbols, self._codes())
        if unknown.any():
            bad = chr(int(self.symbols[np.argmax(unknown)]))
            raise UnrecognizedBaseError(f"Symbol {bad!r} is not part of the sequence frequency table")
        self.symbols.flags.writeable = False

    @classmethod
    def random(
        cls,
        frequency_table: Iterable[tuple[str, float]],
        length: int,
        rng: np.random.Generator | None = None,
    ) -> "Sequence":
        sequence = cls(b"", frequency_table)
        sequence.extend(length, rng)
        return sequence

    @property
    def alphabet(self) -> tuple[str, ...]:
        return tuple(symbol for symbol, _ in self.frequency_table)

    @property
    def total_weight(self) -> float:
        return float(sum(weight for _, weight in self.frequency_table))

    def extend(self, length: int, rng: np.random.Generator | None = None) -> None:
        """Append ``length`` symbols drawn from the frequency table.

        Only meant for sequences still being generated; sequences handed out by
        a model or by evolution are treated as immutable.
        """
        if length < 0:
            raise ValueError("Cannot extend a sequence by a negative length")
        if length == 0:
            return
        generator = rng if rng is not None else np.random.default_rng()
        cumulative = np.cumsum([weight for _, weight in self.frequency_table])
        draws = generator.uniform(0.0, self.total_weight, size=length)
        drawn = self._codes()[sample_indices(cumulative, draws)]
        symbols = np.concatenate([self.symbols, drawn])
        symbols.flags.writeable = False
        self.symbols = symbols

    def _codes(self) -> np.ndarray:
        return np.frombuffer("".join(self.alphabet).encode("ascii"), dtype=np.uint8)

    def __len__(self) -> int:
        return int(self.symbols.shape[0])

    def __str__(self) -> str:
        return self.symbols.tobytes().decode("ascii")

    def __repr__(self) -> str:
        preview = str(self)
        if len(preview) > 20:
            preview = preview[:17] + "..."
        return f"Sequence({preview!r}, length={len(self)})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Sequence):
            return NotImplemented
        return self.frequency_table == other.frequency_table and np.array_equal(self.symbols, other.symbols)

    __hash__ = None  # type: ignore[assignment]


def _as_symbol_array(symbols: np.ndarray | bytes | str | SequenceABC[str]) -> np.ndarray:
    if isinstance(symbols, np.ndarray):
        return np.ascontiguousarray(symbols, dtype=np.uint8).copy()
    if isinstance(symbols, str):
        payload = symbols.encode("ascii")
    elif isinstance(symbols, (bytes, bytearray)):
        payload = bytes(symbols)
    else:
        payload = "".join(symbols).encode("ascii")
    return np.frombuffer(payload, dtype=np.uint8).copy()


__all__ = ["FrequencyTable", "Sequence", "normalize_frequency_table", "sample_indices"]
