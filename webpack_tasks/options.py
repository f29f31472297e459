"""Options accepted by the webpack task factories."""

from __future__ import annotations

import os
from typing import Any, Dict, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

Mode = Literal["production", "development"]

_RECOGNIZED_KEYS: Dict[str, str] = {
    "config": "config",
    "outputStats": "output_stats",
    "output_stats": "output_stats",
    "mode": "mode",
}


class WebpackTaskOptions(BaseModel):
    """Recognized task options plus the overrides merged into each config."""

    config: Optional[str] = Field(default=None, description="Path to the configuration file.")
    output_stats: Union[bool, str, None] = Field(
        default=None,
        alias="outputStats",
        description="True writes stats.json; a string names the stats file.",
    )
    mode: Optional[Mode] = None
    overrides: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    @field_validator("config", "output_stats", mode="before")
    @classmethod
    def _stringify_paths(cls, value: Any) -> Any:
        if isinstance(value, os.PathLike):
            return os.fspath(value)
        return value

    @classmethod
    def from_mapping(
        cls,
        options: Optional[Mapping[str, Any]] = None,
        **extra: Any,
    ) -> "WebpackTaskOptions":
        """Split a flat options mapping into named fields and overrides."""

        combined: Dict[str, Any] = dict(options or {})
        combined.update(extra)

        named: Dict[str, Any] = {}
        overrides: Dict[str, Any] = {}
        for key, value in combined.items():
            field_name = _RECOGNIZED_KEYS.get(key)
            if field_name is None:
                overrides[key] = value
            else:
                named[field_name] = value
        return cls(overrides=overrides, **named)

    def merge_fields(self) -> Dict[str, Any]:
        """Fields merged into the bundler configuration.

        ``mode`` is a bundler configuration key and is forwarded when set;
        ``config`` and ``output_stats`` only steer the task.
        """

        fields = dict(self.overrides)
        fields.pop("config", None)
        if self.mode is not None:
            fields["mode"] = self.mode
        return fields


def coerce_options(
    options: Union[WebpackTaskOptions, Mapping[str, Any], None],
    extra: Mapping[str, Any],
) -> WebpackTaskOptions:
    if isinstance(options, WebpackTaskOptions):
        if not extra:
            return options
        payload = options.model_dump(exclude={"overrides"}, exclude_none=True)
        payload.update(options.overrides)
        return WebpackTaskOptions.from_mapping(payload, **extra)
    return WebpackTaskOptions.from_mapping(options, **extra)
