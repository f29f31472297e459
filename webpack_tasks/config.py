"""Locate and load bundler configuration files."""

from __future__ import annotations

import hashlib
import importlib.machinery
import importlib.util
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional, Union

import yaml

from .errors import ConfigLoadError
from .runtime import resolve_cwd

logger = logging.getLogger(__name__)

BUILD_CONFIG_NAME = "webpack.config.py"
SERVE_CONFIG_NAME = "webpack.serve.config.py"
CONFIG_EXPORT = "config"

_DATA_SUFFIXES = {".json", ".yaml", ".yml"}


@dataclass(slots=True)
class StaticConfig:
    value: Any


@dataclass(slots=True)
class ConfigFactory:
    factory: Callable[[Mapping[str, object]], Any]


LoadedConfig = Union[StaticConfig, ConfigFactory]


def resolve_config_path(explicit: Optional[str], default: str) -> Path:
    return resolve_cwd(explicit or default)


def load_config(path: Path) -> LoadedConfig:
    """Load a configuration file and classify its exported value.

    ``.json``, ``.yaml`` and ``.yml`` files are plain data. Anything else is
    executed as a Python module in a fresh namespace and must define a
    module-level ``config``, either the configuration itself or a callable
    that builds it from the invocation arguments.
    """

    if path.suffix.lower() in _DATA_SUFFIXES:
        return StaticConfig(_load_data(path))

    exported = _exec_module(path)
    if callable(exported):
        return ConfigFactory(exported)
    return StaticConfig(exported)


def resolve_configs(loaded: LoadedConfig, args: Mapping[str, object]) -> List[Any]:
    if isinstance(loaded, ConfigFactory):
        logger.debug("Calling configuration factory %r", loaded.factory)
        value = loaded.factory(args)
    else:
        value = loaded.value
    return normalize_configs(value)


def normalize_configs(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _load_data(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        return json.loads(text)
    return yaml.safe_load(text) or {}


def _exec_module(path: Path) -> Any:
    # Unique per path so configs sharing a file name never collide.
    digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:12]
    module_name = f"_webpack_config_{digest}"
    loader = importlib.machinery.SourceFileLoader(module_name, str(path))
    spec = importlib.util.spec_from_file_location(module_name, path, loader=loader)
    if spec is None or spec.loader is None:
        raise ConfigLoadError(f"Unable to load configuration module: {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    finally:
        sys.modules.pop(module_name, None)

    if not hasattr(module, CONFIG_EXPORT):
        raise ConfigLoadError(f"Configuration module {path} does not define '{CONFIG_EXPORT}'.")
    return getattr(module, CONFIG_EXPORT)
