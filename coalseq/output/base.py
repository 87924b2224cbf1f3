from collections.abc import Mapping, Sequence

import numpy as np
import torch
import torch.nn.functional as F

DEFAULT_ALPHABET: tuple[str, ...] = ("A", "G", "C", "T")


def alphabet_index(alphabet: Sequence[str]) -> Mapping[str, int]:
    return {symbol: idx for idx, symbol in enumerate(alphabet)}


def one_hot_encode(sequence: str, seq_length: int, alphabet: Sequence[str] = DEFAULT_ALPHABET) -> np.ndarray:
    """Convert a nucleotide string into an LxC one-hot matrix using PyTorch."""
    if len(sequence) != seq_length:
        raise ValueError(f"Sequence length mismatch: expected {seq_length}, observed {len(sequence)}")

    mapping = alphabet_index(alphabet)
    try:
        indices = [mapping[symbol] for symbol in sequence]
    except KeyError as exc:
        raise ValueError(f"Unsupported nucleotide encountered: {exc.args[0]!r}") from exc

    index_tensor = torch.as_tensor(indices, dtype=torch.long)
    one_hot = F.one_hot(index_tensor, num_classes=len(alphabet))
    return one_hot.to(dtype=torch.uint8).cpu().numpy()


def alignment_length(sequences: Mapping[str, str]) -> int | None:
    """Shared length of all sequences, or ``None`` when they differ (or there are none)."""
    lengths = {len(value) for value in sequences.values()}
    if len(lengths) != 1:
        return None
    return lengths.pop()
