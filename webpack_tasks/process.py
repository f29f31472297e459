"""Child process helpers for long-running tool tasks."""

from __future__ import annotations

import asyncio
import logging
import os
import shlex
import signal
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Sequence

from .errors import SpawnError

logger = logging.getLogger(__name__)


def encode_args(args: Iterable[str | os.PathLike[str]]) -> List[str]:
    """Quote arguments so a logged command line can be pasted into a shell."""

    return [shlex.quote(os.fspath(arg)) for arg in args]


async def spawn(
    cmd: str | os.PathLike[str],
    args: Sequence[str | os.PathLike[str]] = (),
    *,
    cwd: Optional[str | Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> None:
    """Run ``cmd`` with inherited stdio and wait for it to exit.

    Output is not captured. Exit code 0 completes normally; any other exit
    raises :class:`~webpack_tasks.errors.SpawnError`.
    """

    command = [os.fspath(cmd), *(os.fspath(arg) for arg in args)]
    merged_env = None
    if env is not None:
        merged_env = os.environ.copy()
        merged_env.update(env)

    process = await asyncio.create_subprocess_exec(
        *command,
        cwd=str(cwd) if cwd is not None else None,
        env=merged_env,
    )
    logger.debug("Spawned pid %s: %s", process.pid, " ".join(encode_args(command)))
    returncode = await process.wait()

    if returncode == 0:
        return
    if returncode < 0:
        raise SpawnError(command, returncode, signal_name=_signal_name(-returncode))
    raise SpawnError(command, returncode)


def _signal_name(number: int) -> str:
    try:
        return signal.Signals(number).name
    except ValueError:
        return str(number)
