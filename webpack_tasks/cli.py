"""Command-line entry point for running webpack tasks."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml
from dotenv import load_dotenv

from .build import TaskFunction
from .errors import TaskError
from .merge import deep_merge
from .tasks import get_task, list_tasks

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "WEBPACK_TASKS_LOG_LEVEL"


def main(argv: Optional[Sequence[str]] = None) -> int:
    _load_local_env()
    parser = _build_parser()
    # Unrecognized flags stay visible to config factories through runtime.argv().
    args, extra = parser.parse_known_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )
    if extra:
        logger.debug("Passing through arguments: %s", extra)

    if args.command == "list":
        _print_json({"tasks": [spec.to_dict() for spec in list_tasks()]})
        return 0
    if args.command == "build":
        options: Dict[str, Any] = _parse_overrides(parser, args.set)
        if args.config:
            options["config"] = args.config
        if args.output_stats is not None:
            options["outputStats"] = args.output_stats
        if args.mode:
            options["mode"] = args.mode
        return _run("webpack", get_task("webpack").factory(options))

    options = {"config": args.config, "mode": args.mode}
    options = {key: value for key, value in options.items() if value is not None}
    return _run("webpack-dev-server", get_task("webpack-dev-server").factory(options))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="webpack-tasks", description="Run webpack as build pipeline tasks.")
    parser.add_argument(
        "--log-level",
        default=os.environ.get(LOG_LEVEL_ENV, "INFO"),
        choices=["debug", "info", "warning", "error", "DEBUG", "INFO", "WARNING", "ERROR"],
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List registered tasks.")

    build = subparsers.add_parser("build", help="Compile with webpack.")
    build.add_argument("--config", help="Configuration file (default: webpack.config.py).")
    build.add_argument(
        "--output-stats",
        nargs="?",
        const=True,
        default=None,
        help="Write stats JSON; optionally give the file name (default: stats.json).",
    )
    build.add_argument("--mode", choices=["production", "development"])
    build.add_argument("--set", action="append", help="Config override KEY=VALUE (repeatable, dotted keys nest).")

    serve = subparsers.add_parser("serve", help="Run webpack-dev-server.")
    serve.add_argument("--config", help="Configuration file (default: webpack.serve.config.py).")
    serve.add_argument("--mode", choices=["production", "development"])

    return parser


def _run(slug: str, task: TaskFunction) -> int:
    try:
        asyncio.run(task())
    except TaskError as exc:
        logger.error("%s", exc)
        _print_json({"task": slug, "status": "failed", "error": str(exc)})
        return 1
    except KeyboardInterrupt:
        _print_json({"task": slug, "status": "interrupted"})
        return 130
    _print_json({"task": slug, "status": "ok"})
    return 0


def _parse_overrides(parser: argparse.ArgumentParser, values: Optional[List[str]]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for entry in values or []:
        if "=" not in entry:
            parser.error(f"Override must be KEY=VALUE (got '{entry}')")
        key, raw_value = entry.split("=", 1)
        key = key.strip()
        if not key:
            parser.error("Override key cannot be empty.")
        try:
            value = yaml.safe_load(raw_value)
        except yaml.YAMLError:
            value = raw_value
        nested: Any = value
        for part in reversed(key.split(".")):
            nested = {part: nested}
        overrides = deep_merge(overrides, nested)
    return overrides


def _load_local_env() -> None:
    env_file = Path.cwd() / ".env"
    if env_file.exists():
        load_dotenv(env_file)


def _print_json(payload: Dict[str, object]) -> None:
    print(json.dumps(payload, indent=2))


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
