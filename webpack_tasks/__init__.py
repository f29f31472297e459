"""Pipeline tasks that run webpack builds and the webpack dev server."""

__version__ = "0.1.0"

from .build import TaskFunction, webpack_task
from .errors import BuildError, ConfigLoadError, ConfigNotFoundError, SpawnError, TaskError
from .options import WebpackTaskOptions
from .serve import webpack_dev_server_task
from .tasks import TaskOptionSpec, TaskSpec, get_task, list_tasks, register_task

__all__ = [
    "__version__",
    "TaskFunction",
    "webpack_task",
    "webpack_dev_server_task",
    "WebpackTaskOptions",
    "TaskError",
    "BuildError",
    "ConfigLoadError",
    "ConfigNotFoundError",
    "SpawnError",
    "TaskOptionSpec",
    "TaskSpec",
    "get_task",
    "list_tasks",
    "register_task",
]
