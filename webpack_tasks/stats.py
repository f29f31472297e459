"""Build statistics artifacts and outcome classification."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Mapping, Optional, Protocol, Union

from .runtime import resolve_cwd

DEFAULT_STATS_FILE = "stats.json"
ERRORS_ONLY = "errors-only"


class Stats(Protocol):
    """Statistics object handed to the compile callback by the bundler."""

    def has_errors(self) -> bool: ...

    def to_json(self, preset: Optional[str] = None) -> Mapping[str, Any]: ...


@dataclass(slots=True)
class BuildSuccess:
    pass


@dataclass(slots=True)
class BuildFailure:
    errors: List[Any] = field(default_factory=list)
    transport_error: Optional[Any] = None

    @property
    def error_count(self) -> int:
        # Matches the errors recorded in the stats artifact.
        if self.errors or self.transport_error is None:
            return len(self.errors)
        return 1


BuildOutcome = Union[BuildSuccess, BuildFailure]


def stats_path(output_stats: Union[bool, str, None]) -> Optional[Path]:
    """Return where the stats artifact goes, or ``None`` when disabled."""

    if output_stats is None or output_stats is False:
        return None
    if output_stats is True:
        return resolve_cwd(DEFAULT_STATS_FILE)
    if not output_stats:
        return None
    return resolve_cwd(output_stats)


def write_stats(stats: Stats, path: Path) -> Path:
    """Write the full statistics report as pretty-printed JSON."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(stats.to_json(), indent=2, default=str) + "\n", encoding="utf-8")
    return path


def classify_outcome(err: Optional[BaseException], stats: Optional[Stats]) -> BuildOutcome:
    """A transport error or reported compile errors make the build a failure."""

    has_errors = stats is not None and stats.has_errors()
    if err is None and not has_errors:
        return BuildSuccess()

    errors: List[Any] = []
    if stats is not None:
        errors.extend(stats.to_json(ERRORS_ONLY).get("errors", []))
    transport = _transport_entry(err) if err is not None else None
    return BuildFailure(errors=errors, transport_error=transport)


def format_error(entry: Any) -> str:
    """Render a structured error entry as a single log line."""

    if isinstance(entry, Mapping):
        message = str(entry.get("message", entry))
        origin = entry.get("moduleName") or entry.get("file")
        location = entry.get("loc")
        if origin and location:
            return f"{origin} {location}: {message}"
        if origin:
            return f"{origin}: {message}"
        return message
    return str(entry)


def _transport_entry(err: BaseException) -> Any:
    if isinstance(err, BaseException):
        return {"message": str(err) or type(err).__name__, "type": type(err).__name__}
    return err
