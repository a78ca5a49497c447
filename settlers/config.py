"""Server configuration for saved games and advertised features.

Values come from defaults, a YAML file, or SETTLERS_* environment
variables:

    savegame:
      dir: saves
      model_version: 2300
    features:
      accounts: false
      channels: true
    logging:
      level: INFO
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from .errors import ConfigurationError
from .savegame.model import MODEL_VERSION

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(name: str, raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    value = str(raw).strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, not {raw!r}")


def _parse_model_version(name: str, raw: Any) -> int:
    try:
        version = int(raw)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be an integer, not {raw!r}") from None
    if version <= 0:
        raise ConfigurationError(f"{name} must be positive, not {version}")
    return version


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = data.get(name)
    if section is None:
        return {}
    if not isinstance(section, Mapping):
        raise ConfigurationError(f"{name} must be a mapping, not {section!r}")
    return section


@dataclass(frozen=True)
class ServerConfig:
    """Savegame and feature settings."""
    savegame_dir: Path = field(default_factory=lambda: Path("saves"))
    model_version: int = MODEL_VERSION

    # Features advertised to clients
    accounts_enabled: bool = False
    channels_enabled: bool = True

    log_level: str = "INFO"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ServerConfig:
        """Build from a nested dict shaped like the YAML file."""
        savegame = _section(data, "savegame")
        features = _section(data, "features")
        logging_cfg = _section(data, "logging")
        defaults = cls()

        return cls(
            savegame_dir=Path(savegame.get("dir", defaults.savegame_dir)),
            model_version=_parse_model_version(
                "savegame.model_version", savegame.get("model_version", defaults.model_version)
            ),
            accounts_enabled=_parse_bool(
                "features.accounts", features.get("accounts", defaults.accounts_enabled)
            ),
            channels_enabled=_parse_bool(
                "features.channels", features.get("channels", defaults.channels_enabled)
            ),
            log_level=str(logging_cfg.get("level", defaults.log_level)).upper(),
        )

    @classmethod
    def from_yaml(cls, path: Path) -> ServerConfig:
        """Load config from YAML file."""
        path = Path(path)
        if not path.exists():
            logger.warning(f"Config file not found: {path}, using defaults")
            return cls()

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Can't parse config file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")
        return cls.from_mapping(data)

    @classmethod
    def from_env(cls, base: ServerConfig | None = None) -> ServerConfig:
        """Override base (or defaults) with any SETTLERS_* environment variables."""
        config = base or cls()
        overrides: dict[str, Any] = {}

        if "SETTLERS_SAVEGAME_DIR" in os.environ:
            overrides["savegame_dir"] = Path(os.environ["SETTLERS_SAVEGAME_DIR"])
        if "SETTLERS_MODEL_VERSION" in os.environ:
            overrides["model_version"] = _parse_model_version(
                "SETTLERS_MODEL_VERSION", os.environ["SETTLERS_MODEL_VERSION"]
            )
        if "SETTLERS_ACCOUNTS" in os.environ:
            overrides["accounts_enabled"] = _parse_bool(
                "SETTLERS_ACCOUNTS", os.environ["SETTLERS_ACCOUNTS"]
            )
        if "SETTLERS_CHANNELS" in os.environ:
            overrides["channels_enabled"] = _parse_bool(
                "SETTLERS_CHANNELS", os.environ["SETTLERS_CHANNELS"]
            )
        if "SETTLERS_LOG_LEVEL" in os.environ:
            overrides["log_level"] = os.environ["SETTLERS_LOG_LEVEL"].upper()

        return replace(config, **overrides) if overrides else config


def load_config(path: Path | None = None) -> ServerConfig:
    """YAML file (if given) with environment overrides on top."""
    base = ServerConfig.from_yaml(path) if path is not None else ServerConfig()
    return ServerConfig.from_env(base)
