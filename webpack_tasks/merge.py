"""Deep merge of bundler configurations with task overrides."""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Mapping, Sequence


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge ``override`` into ``base`` without mutating either.

    Nested mappings merge key by key, lists concatenate so loader and plugin
    chains compose, and any other override value replaces the base value.
    """

    merged: Dict[str, Any] = copy.deepcopy(dict(base))
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        elif isinstance(current, list) and isinstance(value, (list, tuple)):
            merged[key] = current + copy.deepcopy(list(value))
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def merge_configs(configs: Sequence[Mapping[str, Any]], overrides: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """Apply ``overrides`` to every config, one merged entry per input."""

    fields = {key: value for key, value in overrides.items() if key != "config"}
    return [deep_merge(config, fields) for config in configs]
