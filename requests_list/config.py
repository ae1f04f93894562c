# Requests list: configuration
# Override defaults via config.yaml, REQUESTS_LIST_CONFIG or --config.

import logging
import os
import sys
import yaml
from pathlib import Path
from dataclasses import dataclass, field
from typing import List, Optional

from .errors import ConfigError
from .schema import SAVED_KINDS

CONFIG_PATH = Path(__file__).parent / "config.yaml"
CONFIG_ENV = "REQUESTS_LIST_CONFIG"


@dataclass
class Config:
    """Runtime configuration for requests lists."""

    # Store type names treated as saved records
    saved_kinds: List[str] = field(default_factory=lambda: list(SAVED_KINDS))

    # Logging
    log_level: str = "INFO"
    log_format: str = "%(asctime)s [requests-list] %(levelname)s: %(message)s"

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Config":
        """Load config from YAML file, falling back to defaults when it does not exist."""
        if path:
            cfg_path = Path(path)
        elif os.environ.get(CONFIG_ENV):
            cfg_path = Path(os.environ[CONFIG_ENV])
        else:
            cfg_path = CONFIG_PATH
        if not cfg_path.exists():
            return cls()
        with open(cfg_path, "r") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ConfigError(f"{cfg_path} must contain a mapping, got {type(data).__name__}")
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


def configure_logging(cfg: Config) -> None:
    """Set up root logging for command-line use."""
    logging.basicConfig(
        level=getattr(logging, str(cfg.log_level).upper(), logging.INFO),
        format=cfg.log_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
