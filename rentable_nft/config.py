import json
import logging
import os
from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

Environment = Enum("Environment", ["local", "dev", "int", "prod"])


@dataclass
class RentingConfig:
    name: str = "RentableNFT"
    symbol: str = "RNFT"
    allow_rerent: bool = False


def current_environment() -> Environment:
    return Environment[os.environ.get("ENV", "local")]


def load_config(env: Environment | None = None, config_dir: Path | str | None = None) -> RentingConfig:
    """Load ``<config_dir>/<env>/renting.json``, falling back to defaults when the file is missing.

    Unknown keys in the file are ignored.
    """
    env = env if env is not None else current_environment()
    config_dir = Path(config_dir) if config_dir is not None else Path.cwd() / "configs"
    config_file = config_dir / env.name / "renting.json"
    if not config_file.exists():
        logger.warning(f"no config at {config_file}, using defaults")
        return RentingConfig()

    with open(config_file, "r") as f:
        config = json.load(f)

    known = {f.name for f in fields(RentingConfig)}
    ignored = set(config) - known
    if ignored:
        logger.warning(f"ignoring unknown config keys {sorted(ignored)} in {config_file}")
    allow_rerent = config.get("allow_rerent", False)
    if not isinstance(allow_rerent, bool):
        raise ValueError(f"allow_rerent must be a JSON boolean in {config_file}, got {allow_rerent!r}")
    return RentingConfig(**{k: v for k, v in config.items() if k in known})
