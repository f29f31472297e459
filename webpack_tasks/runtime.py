"""Process-level collaborators shared by the task factories.

These mirror the small surface a task runner offers to its tasks: the parsed
argument vector, path resolution relative to the working directory or to an
installed package, and optional imports of tools that may not be installed.
"""

from __future__ import annotations

import importlib
import importlib.util
import logging
import re
import sys
from pathlib import Path
from types import ModuleType
from typing import Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"^-?\d+(\.\d+)?$")


def argv(args: Optional[Sequence[str]] = None) -> Dict[str, object]:
    """Parse the process argument vector into a flag mapping.

    Positional values are collected under ``"_"``. ``--key value`` and
    ``--key=value`` assign values, ``--flag`` sets ``True`` and ``--no-flag``
    sets ``False``. Keys given more than once collect their values in a list.
    """

    tokens = list(sys.argv[1:] if args is None else args)
    positionals: List[object] = []
    parsed: Dict[str, object] = {"_": positionals}

    index = 0
    while index < len(tokens):
        token = tokens[index]
        following = tokens[index + 1] if index + 1 < len(tokens) else None

        if token == "--":
            positionals.extend(_coerce(value) for value in tokens[index + 1 :])
            break

        if token.startswith("--"):
            key, sep, raw_value = token[2:].partition("=")
            if sep:
                _assign(parsed, key, _coerce(raw_value))
            elif key.startswith("no-"):
                _assign(parsed, key[3:], False)
            elif following is not None and not _is_flag(following):
                _assign(parsed, key, _coerce(following))
                index += 1
            else:
                _assign(parsed, key, True)
        elif _is_flag(token):
            letters = token[1:]
            if len(letters) == 1 and following is not None and not _is_flag(following):
                _assign(parsed, letters, _coerce(following))
                index += 1
            else:
                for letter in letters:
                    _assign(parsed, letter, True)
        else:
            positionals.append(_coerce(token))
        index += 1

    return parsed


def resolve_cwd(name: str | Path) -> Path:
    """Return ``name`` as an absolute path under the current working directory."""

    path = Path(name)
    if not path.is_absolute():
        path = Path.cwd() / path
    return path.resolve()


def resolve(spec: str) -> Optional[Path]:
    """Locate ``<package>/<relative file>`` inside an installed package."""

    package, _, relative = spec.partition("/")
    try:
        found = importlib.util.find_spec(package)
    except (ImportError, ValueError):
        return None
    if found is None:
        return None

    if found.submodule_search_locations:
        roots = [Path(location) for location in found.submodule_search_locations]
    elif found.origin:
        if not relative:
            return Path(found.origin).resolve()
        roots = [Path(found.origin).parent]
    else:
        return None

    for root in roots:
        candidate = root / relative if relative else root
        if candidate.exists():
            return candidate.resolve()
    return None


def try_import(name: str) -> Optional[ModuleType]:
    """Import ``name`` or return ``None`` when the module is not installed."""

    try:
        return importlib.import_module(name)
    except ModuleNotFoundError as exc:
        # Errors raised by the module's own imports are not "missing".
        if exc.name is not None and name != exc.name and not name.startswith(f"{exc.name}."):
            raise
        logger.debug("Optional module '%s' is not available: %s", name, exc)
        return None


def _is_flag(token: str) -> bool:
    return token.startswith("-") and len(token) > 1 and not _NUMBER_RE.match(token)


def _coerce(value: str) -> object:
    if _NUMBER_RE.match(value):
        return float(value) if "." in value else int(value)
    return value


def _assign(parsed: Dict[str, object], key: str, value: object) -> None:
    if key in parsed and key != "_":
        existing = parsed[key]
        if isinstance(existing, list):
            existing.append(value)
        else:
            parsed[key] = [existing, value]
        return
    parsed[key] = value
