from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from pathlib import Path

from ..base import DEFAULT_ALPHABET


class AlignmentWriter(ABC):
    """Abstract base class for writers that persist assembled taxon sequences."""

    format_name: str = ""

    def __init__(
        self,
        output_path: Path | str,
        *,
        alphabet: Sequence[str] = DEFAULT_ALPHABET,
        parallel_cores: int = 1,
    ) -> None:
        self.output_path = Path(output_path)
        self.alphabet = tuple(alphabet)
        self.parallel_cores = max(1, parallel_cores)

    def _prepare_path(self) -> Path:
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        return self.output_path

    @abstractmethod
    def write(self, sequences: Mapping[str, str]) -> Path:
        """Persist ``taxon -> sequence`` pairs and return the materialized path."""
        raise NotImplementedError
