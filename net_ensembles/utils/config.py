"""
Configuration management for ensemble construction.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Type, TypeVar, Union

import yaml

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="Config")


@dataclass
class Config:
    """
    Base configuration class with save/load functionality.

    Supports JSON and YAML formats.
    """

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)

    def save(self, path: Union[str, Path]) -> None:
        """
        Save configuration to file.

        Supports .json and .yaml/.yml extensions.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = self.to_dict()

        if path.suffix == ".json":
            with open(path, "w") as f:
                json.dump(data, f, indent=2)
        elif path.suffix in [".yaml", ".yml"]:
            with open(path, "w") as f:
                yaml.safe_dump(data, f, default_flow_style=False)
        else:
            raise ValueError(f"Unsupported file format: {path.suffix}")

    @classmethod
    def load(cls: Type[T], path: Union[str, Path]) -> T:
        """Load configuration from a .json or .yaml/.yml file."""
        return cls.from_dict(_read(path))

    @classmethod
    def from_dict(cls: Type[T], data: Dict[str, Any]) -> T:
        """Create configuration from dictionary, ignoring unknown keys."""
        valid_fields = {f.name for f in fields(cls)}
        filtered_data = {k: v for k, v in data.items() if k in valid_fields}
        return cls(**filtered_data)

    def update(self: T, **kwargs) -> T:
        """Create a new config with updated values."""
        data = self.to_dict()
        data.update(kwargs)
        return self.__class__.from_dict(data)


def _read(path: Union[str, Path]) -> Dict[str, Any]:
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    if path.suffix == ".json":
        with open(path) as f:
            data = json.load(f)
    elif path.suffix in [".yaml", ".yml"]:
        with open(path) as f:
            data = yaml.safe_load(f)
    else:
        raise ValueError(f"Unsupported file format: {path.suffix}")

    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} does not contain a mapping")
    return data


@dataclass
class ErCConfig(Config):
    """Erdős–Rényi ensemble with constant edge count."""

    vertex_count: int = 100
    target_edges: int = 150
    seed: Optional[int] = None

    def build(self):
        from net_ensembles.ensembles.er_c import ErEnsembleC

        return ErEnsembleC(self.vertex_count, self.target_edges, rng=self.seed)


@dataclass
class ErMConfig(Config):
    """Erdős–Rényi ensemble with constant connection probability."""

    vertex_count: int = 100
    prob: float = 0.03
    seed: Optional[int] = None

    def build(self):
        from net_ensembles.ensembles.er_m import ErEnsembleM

        return ErEnsembleM(self.vertex_count, self.prob, rng=self.seed)


@dataclass
class SwConfig(Config):
    """Small-world ensemble."""

    vertex_count: int = 100
    r_prob: float = 0.1
    neighbor_distance: int = 2
    seed: Optional[int] = None

    def build(self):
        from net_ensembles.ensembles.small_world.ensemble import SwEnsemble

        return SwEnsemble(
            self.vertex_count,
            self.r_prob,
            rng=self.seed,
            neighbor_distance=self.neighbor_distance,
        )


# Keys that identify each config type when loading an untyped file.
_SIGNATURES = [
    ("target_edges", ErCConfig),
    ("prob", ErMConfig),
    ("r_prob", SwConfig),
]


def config_from_dict(data: Dict[str, Any]) -> Config:
    """Pick the config type from the keys present in ``data``."""
    matches = [cls for key, cls in _SIGNATURES if key in data]
    if len(matches) != 1:
        raise ValueError(
            "Cannot infer ensemble type: expected exactly one of "
            f"{[key for key, _ in _SIGNATURES]}, got keys {sorted(data)}"
        )
    return matches[0].from_dict(data)


def load_config(path: Union[str, Path]) -> Config:
    """Load an ensemble config of whichever type the file describes."""
    config = config_from_dict(_read(path))
    logger.debug("Loaded %s from %s", type(config).__name__, path)
    return config


def save_config(config: Config, path: Union[str, Path]) -> None:
    """Save an ensemble config."""
    config.save(path)


def build_ensemble(config: Union[Config, Dict[str, Any], str, Path]):
    """Build an ensemble from a config object, a mapping or a config file."""
    if isinstance(config, dict):
        config = config_from_dict(config)
    elif isinstance(config, (str, Path)):
        config = load_config(config)
    if not isinstance(config, tuple(cls for _, cls in _SIGNATURES)):
        raise TypeError(f"No ensemble is described by {type(config).__name__}")
    return config.build()
