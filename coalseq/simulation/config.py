"""Configuration loading for partitioned sequence simulations (YAML or JSON)."""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

from coalseq.output.writers import WRITER_FORMATS as OUTPUT_FORMATS

from .errors import ModelParameterError
from .substitution import HKY85

logger = logging.getLogger(__name__)

SUPPORTED_MODELS: tuple[str, ...] = ("HKY85",)
DEFAULT_BASES: tuple[str, ...] = ("A", "G", "C", "T")
DEFAULT_FREQUENCIES: tuple[float, ...] = (0.25, 0.25, 0.25, 0.25)


class ConfigurationError(ValueError):
    """Raised when a simulation configuration is missing values or holds invalid ones."""


def _section(payload: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = payload.get(name) or {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"'{name}' section must be a mapping")
    return value


def _resolve_path(value: Any, base_path: Path | None) -> Path:
    path = Path(str(value)).expanduser()
    if not path.is_absolute() and base_path is not None:
        path = base_path / path
    return path


def _as_float(value: Any, name: str) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from exc
    if math.isnan(result):
        raise ConfigurationError(f"{name} must be a number, got NaN")
    return result


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from exc


@dataclass(frozen=True)
class ModelSettings:
    name: str = "HKY85"
    bases: tuple[str, ...] = DEFAULT_BASES
    frequencies: tuple[float, ...] = DEFAULT_FREQUENCIES
    kappa: float = 1.0
    scale: float = 1.0

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "ModelSettings":
        name = str(payload.get("name", "HKY85"))
        if name.upper() not in SUPPORTED_MODELS:
            raise ConfigurationError(f"Unsupported substitution model '{name}'")

        bases = tuple(str(base) for base in payload.get("bases", DEFAULT_BASES))
        if len(bases) != 4 or any(len(base) != 1 for base in bases) or len(set(bases)) != 4:
            raise ConfigurationError("model.bases must list four distinct single-character symbols")

        frequencies = tuple(
            _as_float(value, "model.frequencies") for value in payload.get("frequencies", DEFAULT_FREQUENCIES)
        )
        if len(frequencies) != 4:
            raise ConfigurationError("model.frequencies must contain exactly four values")
        if any(value <= 0 for value in frequencies):
            raise ConfigurationError("model.frequencies must all be greater than zero")
        if not math.isclose(sum(frequencies), 1.0, rel_tol=1e-6):
            logger.warning("Base frequencies sum to %.6f rather than 1", sum(frequencies))

        kappa = _as_float(payload.get("kappa", 1.0), "model.kappa")
        if kappa < 0:
            raise ConfigurationError("model.kappa must be >= 0")
        scale = _as_float(payload.get("scale", 1.0), "model.scale")
        if scale <= 0:
            raise ConfigurationError("model.scale must be > 0")

        return cls(name=name.upper(), bases=bases, frequencies=frequencies, kappa=kappa, scale=scale)

    def build(self) -> HKY85:
        try:
            return HKY85(self.frequencies, self.bases, kappa=self.kappa, scale=self.scale)
        except ModelParameterError as exc:
            raise ConfigurationError(str(exc)) from exc


@dataclass(frozen=True)
class InputSettings:
    tree_file: Path
    partition_file: Path | None = None
    length: int | None = None

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any], *, base_path: Path | None = None) -> "InputSettings":
        if not payload.get("tree_file"):
            raise ConfigurationError("input.tree_file is required")
        tree_file = _resolve_path(payload["tree_file"], base_path)

        partition_value = payload.get("partition_file")
        partition_file = _resolve_path(partition_value, base_path) if partition_value else None

        length_value = payload.get("length")
        length = _as_int(length_value, "input.length") if length_value is not None else None
        if length is not None and length <= 0:
            raise ConfigurationError("input.length must be a positive integer")

        if partition_file is None and length is None:
            raise ConfigurationError("Either input.partition_file or input.length must be provided")
        if partition_file is not None and length is not None:
            logger.warning(
                "Both input.partition_file and input.length are set; using %s and ignoring length %d",
                partition_file,
                length,
            )

        return cls(tree_file=tree_file, partition_file=partition_file, length=length)


@dataclass(frozen=True)
class OutputSettings:
    path: Path
    format: str = "text"

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any], *, base_path: Path | None = None) -> "OutputSettings":
        if not payload.get("path"):
            raise ConfigurationError("output.path is required")
        fmt = str(payload.get("format", "text")).lower()
        if fmt not in OUTPUT_FORMATS:
            raise ConfigurationError(
                f"Unsupported output format '{fmt}'. Expected one of: {', '.join(OUTPUT_FORMATS)}"
            )
        return cls(path=_resolve_path(payload["path"], base_path), format=fmt)

    def ensure_directory(self) -> Path:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        return self.path.parent

    def verify_directory(self) -> Path:
        directory = self.path.parent / "verify"
        directory.mkdir(parents=True, exist_ok=True)
        return directory


@dataclass(frozen=True)
class SimulationConfig:
    model: ModelSettings
    input: InputSettings
    output: OutputSettings
    seed: int | None = None
    parallel_cores: int = 1

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any], *, base_path: Path | str | None = None) -> "SimulationConfig":
        if not isinstance(payload, Mapping):
            raise ConfigurationError("Configuration root must be a mapping")
        base = Path(base_path) if base_path is not None else None

        seed_value = payload.get("seed")
        seed = _as_int(seed_value, "seed") if seed_value is not None else None
        parallel_cores = _as_int(payload.get("parallel_cores", 1), "parallel_cores")
        if parallel_cores < 1:
            raise ConfigurationError("parallel_cores must be at least 1")

        return cls(
            model=ModelSettings.from_mapping(_section(payload, "model")),
            input=InputSettings.from_mapping(_section(payload, "input"), base_path=base),
            output=OutputSettings.from_mapping(_section(payload, "output"), base_path=base),
            seed=seed,
            parallel_cores=parallel_cores,
        )

    def with_seed(self, seed: int | None) -> "SimulationConfig":
        return replace(self, seed=seed)


def read_config_mapping(config_path: Path | str) -> dict[str, Any]:
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        payload = json.loads(text)
    else:
        payload = yaml.safe_load(text)
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a mapping")
    return payload


def load_simulation_config(config_path: Path | str) -> SimulationConfig:
    path = Path(config_path)
    return SimulationConfig.from_mapping(read_config_mapping(path), base_path=path.parent)


__all__ = [
    "ConfigurationError",
    "ModelSettings",
    "InputSettings",
    "OutputSettings",
    "SimulationConfig",
    "OUTPUT_FORMATS",
    "load_simulation_config",
    "read_config_mapping",
]
