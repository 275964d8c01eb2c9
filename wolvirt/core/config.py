"""Configuration loading and validation for the YAML config file."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from wolvirt.core.errors import ConfigLoadError, ConfigValidationError

LOGGER = logging.getLogger(__name__)

DEFAULT_ADDRESS = "127.0.0.1:9"
DEFAULT_LIBVIRT_URI = "qemu:///system"
DEFAULT_LOG_LEVEL = "info"
DEFAULT_BUFFER_SIZE = 108


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ConfigValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class Config:
    address: str = DEFAULT_ADDRESS
    libvirt_uri: str = DEFAULT_LIBVIRT_URI
    log_level: str = DEFAULT_LOG_LEVEL
    buffer_size: int = DEFAULT_BUFFER_SIZE


def default_config_path() -> Path:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "wolvirt/config.yaml"


def _load_schema_validator() -> Any:
    schema_text = resources.files("wolvirt.schemas").joinpath("config.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError(f"Could not read config file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ConfigValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigValidationError(f"Config file {path} must contain a mapping at root")
    return loaded


def load_config(path: Path | None = None) -> Config:
    """Load the config file, falling back to defaults.

    An explicit ``path`` must exist; the default XDG location is optional.
    """
    if path is None:
        path = default_config_path()
        if not path.exists():
            LOGGER.debug("No config file at %s, using defaults", path)
            return Config()

    doc = _read_yaml(path)
    try:
        _load_schema_validator().validate(doc)
    except ValidationError as exc:
        where = ".".join(str(p) for p in exc.path)
        where = f" ({where})" if where else ""
        raise ConfigValidationError(
            f"Schema validation failed for {path}{where}: {exc.message}"
        ) from exc

    LOGGER.debug("Loaded config from %s", path)
    return Config(**doc)
