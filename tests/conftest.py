from __future__ import annotations

import sys
import threading
import types
from pathlib import Path
from typing import Any, Callable, Iterator, List, Optional

import pytest


class FakeStats:
    """Stand-in for the stats object the bundler passes to its callback."""

    def __init__(self, errors: Optional[List[Any]] = None) -> None:
        self.errors = list(errors or [])

    def has_errors(self) -> bool:
        return bool(self.errors)

    def to_json(self, preset: Optional[str] = None) -> dict:
        if preset == "errors-only":
            return {"errors": list(self.errors)}
        return {
            "hash": "4f2a9c",
            "errors": list(self.errors),
            "warnings": [],
            "modules": [{"name": "./src/index.js", "size": 128}],
        }


class FakeBundler:
    """Records the configs it receives and calls back like the real entry point."""

    def __init__(
        self,
        stats: Optional[FakeStats] = None,
        err: Optional[BaseException] = None,
        *,
        threaded: bool = False,
        repeat: int = 1,
    ) -> None:
        self.stats = stats if stats is not None else FakeStats()
        self.err = err
        self.threaded = threaded
        self.repeat = repeat
        self.calls: List[list] = []
        self.workers: List[threading.Thread] = []

    def __call__(self, configs: list, callback: Callable[..., None]) -> None:
        self.calls.append(configs)
        if self.threaded:
            worker = threading.Thread(target=callback, args=(self.err, self.stats))
            self.workers.append(worker)
            worker.start()
            return
        for _ in range(self.repeat):
            callback(self.err, self.stats)

    def join(self, timeout: float = 5.0) -> None:
        for worker in self.workers:
            worker.join(timeout)


@pytest.fixture()
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(sys, "argv", ["build.py"])
    return tmp_path


@pytest.fixture()
def install_bundler(monkeypatch: pytest.MonkeyPatch) -> Iterator[Callable[[FakeBundler], FakeBundler]]:
    installed: List[FakeBundler] = []

    def _install(bundler: FakeBundler) -> FakeBundler:
        module = types.ModuleType("webpack")
        module.webpack = bundler  # type: ignore[attr-defined]
        monkeypatch.setitem(sys.modules, "webpack", module)
        installed.append(bundler)
        return bundler

    yield _install
    for bundler in installed:
        bundler.join()


@pytest.fixture()
def without_bundler(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "webpack", None)


def write_config(directory: Path, body: str, name: str = "webpack.config.py") -> Path:
    path = directory / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body, encoding="utf-8")
    return path
