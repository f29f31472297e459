from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Optional

from .build import TaskFunction, webpack_task
from .config import BUILD_CONFIG_NAME, SERVE_CONFIG_NAME
from .serve import DEFAULT_MODE, webpack_dev_server_task


@dataclass(frozen=True)
class TaskOptionSpec:
    description: Optional[str] = None
    default: Optional[object] = None

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {"description": self.description}
        if self.default is not None:
            payload["default"] = self.default
        return payload


@dataclass(frozen=True)
class TaskSpec:
    slug: str
    description: str
    factory: Callable[..., TaskFunction]
    options: Dict[str, TaskOptionSpec] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        return {
            "slug": self.slug,
            "description": self.description,
            "options": {name: spec.to_dict() for name, spec in self.options.items()},
        }


_TASKS: Dict[str, TaskSpec] = {}


def register_task(spec: TaskSpec) -> None:
    if spec.slug in _TASKS:
        raise ValueError(f"Task '{spec.slug}' already registered.")
    _TASKS[spec.slug] = spec


def get_task(slug: str) -> TaskSpec:
    try:
        return _TASKS[slug]
    except KeyError as exc:
        available = ", ".join(sorted(_TASKS))
        raise KeyError(f"Unknown task slug '{slug}'. Available tasks: {available}.") from exc


def list_tasks() -> Iterable[TaskSpec]:
    return _TASKS.values()


def _register_builtin_tasks() -> None:
    register_task(
        TaskSpec(
            slug="webpack",
            description="Compile the project with webpack.",
            factory=webpack_task,
            options={
                "config": TaskOptionSpec(description="Configuration file path.", default=BUILD_CONFIG_NAME),
                "outputStats": TaskOptionSpec(description="Write stats JSON (true for stats.json, or a path)."),
                "mode": TaskOptionSpec(description="webpack mode merged into every configuration."),
            },
        )
    )
    register_task(
        TaskSpec(
            slug="webpack-dev-server",
            description="Serve the project with webpack-dev-server in a child process.",
            factory=webpack_dev_server_task,
            options={
                "config": TaskOptionSpec(description="Configuration file path.", default=SERVE_CONFIG_NAME),
                "mode": TaskOptionSpec(description="production or development.", default=DEFAULT_MODE),
            },
        )
    )


_register_builtin_tasks()
