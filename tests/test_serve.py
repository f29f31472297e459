from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import List

import pytest

from webpack_tasks import SpawnError, serve, webpack_dev_server_task

from .conftest import write_config


@pytest.fixture()
def spawned(monkeypatch: pytest.MonkeyPatch) -> List[tuple]:
    calls: List[tuple] = []

    async def _fake_spawn(cmd, args=(), **kwargs):
        calls.append((cmd, list(args)))

    monkeypatch.setattr(serve.process, "spawn", _fake_spawn)
    return calls


@pytest.fixture()
def server_entry(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    entry = tmp_path / "site-packages" / "webpack_dev_server" / "__main__.py"
    entry.parent.mkdir(parents=True)
    entry.write_text("", encoding="utf-8")
    monkeypatch.setattr(serve, "resolve", lambda spec: entry)
    return entry


def test_missing_config_skips_without_spawning(workspace: Path, server_entry: Path, spawned, caplog) -> None:
    caplog.set_level(logging.INFO, logger="webpack_tasks")

    result = asyncio.run(webpack_dev_server_task()())

    assert result is None
    assert spawned == []
    warnings = [record for record in caplog.records if record.levelno == logging.WARNING]
    assert "no webpack.serve.config.py configuration found" in warnings[0].getMessage()


def test_missing_server_skips(workspace: Path, spawned, monkeypatch: pytest.MonkeyPatch, caplog) -> None:
    write_config(workspace, "config = {}\n", name="webpack.serve.config.py")
    monkeypatch.setattr(serve, "resolve", lambda spec: None)

    assert asyncio.run(webpack_dev_server_task()()) is None
    assert spawned == []
    assert "webpack-dev-server is not installed" in caplog.text


def test_spawns_server_with_development_mode(workspace: Path, server_entry: Path, spawned) -> None:
    config_path = write_config(workspace, "config = {}\n", name="webpack.serve.config.py")

    asyncio.run(webpack_dev_server_task()())

    ((cmd, args),) = spawned
    assert cmd == sys.executable
    assert args == [
        str(server_entry),
        "--config",
        str(config_path.resolve()),
        "--open",
        "--mode",
        "development",
    ]
    assert args[args.index("--mode") + 1] == "development"


def test_explicit_config_and_mode(workspace: Path, server_entry: Path, spawned) -> None:
    config_path = write_config(workspace, "config = {}\n", name="conf/serve.py")

    asyncio.run(webpack_dev_server_task({"config": "conf/serve.py", "mode": "production"})())

    ((_, args),) = spawned
    assert args[2] == str(config_path.resolve())
    assert args[-2:] == ["--mode", "production"]


def test_child_failure_propagates(workspace: Path, server_entry: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    write_config(workspace, "config = {}\n", name="webpack.serve.config.py")

    async def _failing_spawn(cmd, args=(), **kwargs):
        raise SpawnError([cmd, *args], 2)

    monkeypatch.setattr(serve.process, "spawn", _failing_spawn)

    with pytest.raises(SpawnError, match="exit code 2"):
        asyncio.run(webpack_dev_server_task()())
