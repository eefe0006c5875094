from dataclasses import dataclass, fields, replace as dc_replace
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError


@dataclass(frozen=True)
class NetworkConfig:
    """
    Fixed-for-a-run network dimensions and hyperparameters.
    """

    input_size: int = 784
    hidden_size: int = 128
    output_size: int = 10
    train_size: int = 60000
    test_size: int = 10000
    learning_rate: float = 0.3
    epochs: int = 10
    seed: int = 1
    train_data_path: Optional[str] = None
    test_data_path: Optional[str] = None

    def __post_init__(self):
        for name in ('input_size', 'hidden_size', 'output_size', 'train_size', 'test_size', 'epochs'):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")

        if not isinstance(self.learning_rate, (int, float)) or self.learning_rate < 0:
            raise ConfigError(f"learning_rate must be a non-negative number, got {self.learning_rate!r}")

        if not isinstance(self.seed, int) or isinstance(self.seed, bool):
            raise ConfigError(f"seed must be an integer, got {self.seed!r}")

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> "NetworkConfig":
        """
        Builds a config from a mapping, missing keys take their defaults
        ---
        Args:
            values (Dict[str, Any]): Configuration dictionary
        """
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {sorted(unknown)}")
        return cls(**values)

    def replace(self, **overrides) -> "NetworkConfig":
        """Returns a copy with the non-None overrides applied."""
        overrides = {k: v for k, v in overrides.items() if v is not None}
        return dc_replace(self, **overrides)


def load_config(path) -> NetworkConfig:
    """
    Reads a YAML configuration file into a NetworkConfig
    ---
    Args:
        path (str): Path to the YAML file
    Returns:
        NetworkConfig
    """
    try:
        with open(path, 'r') as f:
            values = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Configuration file not found: {path}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Unable to parse configuration file {path}: {e}") from e

    if values is None:
        values = {}
    if not isinstance(values, dict):
        raise ConfigError(f"Configuration file {path} must contain a mapping.")

    return NetworkConfig.from_dict(values)
