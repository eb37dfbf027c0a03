"""
Configuration management for PGA2D.

Provides a configuration class and JSON helpers for the numeric settings of
the engine: value dtype, device and which product table `*` runs.
"""

import json
import logging
from dataclasses import dataclass, field, asdict
from typing import Any, Dict
from pathlib import Path

import torch

from ..core.constants import TABLE_CAYLEY
from ..pga.cayley import ProductTable, get_product_table

logger = logging.getLogger(__name__)


_DTYPES = {
    "float32": torch.float32,
    "float64": torch.float64,
}


@dataclass
class Config:
    """
    Configuration for PGA2D values and products.

    Attributes:
        dtype: Floating point type of slot values ('float32' or 'float64')
        device: Device slot values live on ('cpu', 'cuda', 'mps')
        product_table: Table resolved by Config.table, for explicit
            geometric_product(..., table=config.table) calls ('cayley' or
            'transcribed'). The * operator always uses the Cayley table
    """

    dtype: str = "float32"
    device: str = "cpu"
    product_table: str = TABLE_CAYLEY

    # Additional fields
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.dtype not in _DTYPES:
            raise ValueError(
                f"Unknown dtype: {self.dtype}. Supported: {', '.join(_DTYPES)}"
            )
        # Raises ValueError for unknown names
        get_product_table(self.product_table)

    @property
    def torch_dtype(self) -> torch.dtype:
        return _DTYPES[self.dtype]

    @property
    def table(self) -> ProductTable:
        return get_product_table(self.product_table)

    def tensor_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for multivector constructors and factories."""
        return {"dtype": self.torch_dtype, "device": self.device}

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'Config':
        """Create config from dictionary."""
        # Extract known fields
        known_fields = {f for f in cls.__dataclass_fields__ if f != "extra"}
        known_kwargs = {k: v for k, v in config_dict.items() if k in known_fields}
        extra_kwargs = dict(config_dict.get("extra", {}))
        extra_kwargs.update(
            {k: v for k, v in config_dict.items() if k not in known_fields and k != "extra"}
        )

        config = cls(**known_kwargs)
        config.extra = extra_kwargs
        return config

    def update(self, **kwargs) -> 'Config':
        """Return a new config with updated values."""
        config_dict = self.to_dict()
        config_dict.update(kwargs)
        return Config.from_dict(config_dict)


def load_config(filepath: str) -> Config:
    """
    Load configuration from JSON file.

    Args:
        filepath: Path to JSON config file

    Returns:
        Config object
    """
    filepath = Path(filepath)
    with open(filepath, 'r') as f:
        config_dict = json.load(f)
    logger.debug("Loaded config from %s", filepath)
    return Config.from_dict(config_dict)


def save_config(config: Config, filepath: str) -> None:
    """
    Save configuration to JSON file.

    Args:
        config: Config object to save
        filepath: Output file path
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    with open(filepath, 'w') as f:
        json.dump(config.to_dict(), f, indent=2)
    logger.debug("Saved config to %s", filepath)
