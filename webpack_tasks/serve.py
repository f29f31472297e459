"""Dev-server task: supervise the bundler's development server process."""

from __future__ import annotations

import logging
import sys
from typing import Any, Mapping, Union

from . import process
from .build import TaskFunction
from .config import SERVE_CONFIG_NAME, resolve_config_path
from .options import WebpackTaskOptions, coerce_options
from .runtime import resolve

logger = logging.getLogger(__name__)

SERVER_ENTRY = "webpack_dev_server/__main__.py"
DEFAULT_MODE = "development"


def webpack_dev_server_task(
    options: Union[WebpackTaskOptions, Mapping[str, Any], None] = None,
    **overrides: Any,
) -> TaskFunction:
    """Create a task that runs the dev server until the child process exits."""

    task_options = coerce_options(options, overrides)

    async def webpack_dev_server() -> None:
        config_path = resolve_config_path(task_options.config, SERVE_CONFIG_NAME)
        cmd = resolve(SERVER_ENTRY)

        if cmd is None:
            logger.warning("webpack-dev-server is not installed, skipping")
            return
        if not config_path.exists():
            logger.warning("no %s configuration found, skipping", config_path.name)
            return

        mode = task_options.mode or DEFAULT_MODE
        args = [str(cmd), "--config", str(config_path), "--open", "--mode", mode]

        logger.info("%s %s", cmd, " ".join(process.encode_args(args)))
        await process.spawn(sys.executable, args)

    return webpack_dev_server
