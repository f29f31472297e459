"""Build task: run the bundler once against the resolved configuration."""

from __future__ import annotations

import asyncio
import logging
import threading
from pathlib import Path
from types import ModuleType
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from .config import BUILD_CONFIG_NAME, load_config, resolve_config_path, resolve_configs
from .errors import BuildError, ConfigNotFoundError, TaskError
from .merge import merge_configs
from .options import WebpackTaskOptions, coerce_options
from .runtime import argv, try_import
from .stats import BuildFailure, Stats, classify_outcome, format_error, stats_path, write_stats

logger = logging.getLogger(__name__)

BUNDLER_MODULE = "webpack"
BUNDLER_ENTRY = "webpack"

TaskFunction = Callable[[], Awaitable[None]]


def webpack_task(
    options: Union[WebpackTaskOptions, Mapping[str, Any], None] = None,
    **overrides: Any,
) -> TaskFunction:
    """Create a task that compiles the project with the bundler.

    The returned coroutine function does nothing until awaited. It completes
    with ``None`` when the build succeeds or is skipped, and raises a
    :class:`~webpack_tasks.errors.TaskError` subclass when it fails.
    """

    task_options = coerce_options(options, overrides)

    async def webpack() -> None:
        bundler = try_import(BUNDLER_MODULE)
        if bundler is None:
            logger.warning("webpack is not installed, this task has no effect")
            return

        logger.info("Running Webpack")
        config_path = resolve_config_path(task_options.config, BUILD_CONFIG_NAME)
        logger.info("Webpack Config Path: %s", config_path)

        if not config_path.exists():
            logger.info("%s not found, skipping webpack", config_path.name)
            return

        await _compile(bundler, config_path, task_options)

    return webpack


async def _compile(bundler: ModuleType, config_path: Path, options: WebpackTaskOptions) -> None:
    # The file may have been removed since the first probe; that is an error.
    if not await asyncio.to_thread(config_path.exists):
        raise ConfigNotFoundError(str(config_path))

    loaded = load_config(config_path)
    configs = merge_configs(resolve_configs(loaded, argv()), options.merge_fields())

    entry = _bundler_entry(bundler)
    callback = _CompileCallback(asyncio.get_running_loop(), stats_path(options.output_stats))
    logger.debug("Invoking webpack with %d configuration(s)", len(configs))
    entry(configs, callback)
    await callback.future


def _bundler_entry(bundler: ModuleType) -> Callable[..., Any]:
    entry = getattr(bundler, BUNDLER_ENTRY, None)
    if not callable(entry):
        raise TaskError(f"Module '{bundler.__name__}' does not expose a callable '{BUNDLER_ENTRY}' entry point.")
    return entry


class _CompileCallback:
    """Completion callback that settles the task future exactly once.

    The bundler may call back on the event loop thread or on a worker thread.
    Stats are written and errors logged on the calling thread; the future is
    always settled on the loop.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, stats_file: Optional[Path]) -> None:
        self.future: asyncio.Future[None] = loop.create_future()
        self._loop = loop
        self._stats_file = stats_file
        self._lock = threading.Lock()
        self._called = False

    def __call__(self, err: Optional[BaseException] = None, stats: Optional[Stats] = None) -> None:
        with self._lock:
            if self._called:
                logger.debug("Ignoring repeated webpack completion callback")
                return
            self._called = True

        try:
            self._handle(err, stats)
        except Exception as exc:
            self._loop.call_soon_threadsafe(self._settle, exc)
        else:
            self._loop.call_soon_threadsafe(self._settle, None)

    def _handle(self, err: Optional[BaseException], stats: Optional[Stats]) -> None:
        if self._stats_file is not None:
            if stats is None:
                logger.warning("webpack reported no stats, %s was not written", self._stats_file)
            else:
                write_stats(stats, self._stats_file)
                logger.info("Webpack stats written to %s", self._stats_file)

        outcome = classify_outcome(err, stats)
        if isinstance(outcome, BuildFailure):
            if outcome.transport_error is not None:
                logger.error(
                    "webpack failed: %s",
                    format_error(outcome.transport_error),
                    extra={"webpack_transport_error": outcome.transport_error},
                )
            for entry in outcome.errors:
                logger.error("%s", format_error(entry), extra={"webpack_error": entry})
            raise BuildError(outcome.error_count)

    def _settle(self, exc: Optional[Exception]) -> None:
        if self.future.done():
            return
        if exc is None:
            self.future.set_result(None)
        else:
            self.future.set_exception(exc)
