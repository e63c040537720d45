"""Spawning of one child process per command.

Child output is copied byte for byte to this process's ``sys.stdout`` /
``sys.stderr`` (through their binary ``buffer`` when they have one) as it
arrives. Output of concurrent children interleaves in arrival order with
no ordering guarantee between them.
"""

from __future__ import annotations

import asyncio
import atexit
import codecs
import logging
import os
import signal
import subprocess
import sys
from typing import Any

from .types import CommandFailedError

# Stream buffer ceiling for child output.
LARGE_BUFFER = 1024 * 1_000_000

_CHUNK_SIZE = 64 * 1024

# Background children get their own process group so the shell and whatever
# it started can be terminated together.
_NEW_SESSION = os.name == "posix"

logger = logging.getLogger(__name__)


class ChildRegistry:
    """Children spawned by the orchestrator, killed when it shuts down.

    Background work a command leaves behind after its outcome is known (stream
    copying, waiting for exit) is tracked here too, so callers can wait for it
    or tear everything down in one place.
    """

    def __init__(self) -> None:
        self._children: dict[int, tuple[Any, bool]] = {}
        self._background: set[asyncio.Task] = set()
        self._installed = False

    def install(self) -> ChildRegistry:
        if not self._installed:
            atexit.register(self.shutdown)
            self._installed = True
        return self

    def register(self, proc: Any, *, group: bool = False) -> None:
        """Track ``proc``; with ``group`` its whole process group is signalled."""
        self.install()
        self._children[proc.pid] = (proc, group)

    def discard(self, proc: Any) -> None:
        self._children.pop(proc.pid, None)

    def live(self) -> list[int]:
        return [pid for pid, (proc, _) in self._children.items() if proc.returncode is None]

    def track(self, task: asyncio.Task) -> None:
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def wait_detached(self) -> None:
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    def shutdown(self) -> None:
        for pid in self.live():
            _, group = self._children[pid]
            logger.debug("Terminating child pid %d", pid)
            try:
                if group:
                    os.killpg(pid, signal.SIGTERM)
                else:
                    os.kill(pid, signal.SIGTERM)
            except ProcessLookupError:
                logger.debug("Child pid %d already gone", pid)
        self._children.clear()


default_registry = ChildRegistry()


def process_env(color: bool) -> dict[str, str]:
    env = os.environ.copy()
    if color:
        env["FORCE_COLOR"] = "true"
    return env


async def run_process(
    command: str,
    ready_when: str | None = None,
    *,
    color: bool = False,
    cwd: str | None = None,
    registry: ChildRegistry | None = None,
) -> bool:
    """Run ``command`` in a shell and report whether it succeeded.

    Without ``ready_when`` the outcome is the exit status. With it, the
    outcome is ``True`` as soon as the marker shows up on stdout or stderr,
    leaving the child running, and ``False`` if the child exits first.
    """
    registry = registry or default_registry
    proc = await asyncio.create_subprocess_shell(
        command,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=cwd,
        env=process_env(color),
        limit=LARGE_BUFFER,
        start_new_session=_NEW_SESSION,
    )
    registry.register(proc, group=_NEW_SESSION)
    logger.debug("Spawned pid %d: %s", proc.pid, command)

    ready: asyncio.Future[bool] = asyncio.get_running_loop().create_future()
    pumps = [
        asyncio.create_task(_pump(proc.stdout, "stdout", ready_when, ready)),
        asyncio.create_task(_pump(proc.stderr, "stderr", ready_when, ready)),
    ]
    exited = asyncio.create_task(_wait_for_exit(proc, pumps, registry))
    for task in (*pumps, exited):
        registry.track(task)

    if ready_when is None:
        returncode = await exited
        return returncode == 0

    await asyncio.wait({ready, exited}, return_when=asyncio.FIRST_COMPLETED)
    if ready.done():
        return True

    logger.debug("pid %d exited without printing %r", proc.pid, ready_when)
    return False


def run_blocking(
    command: str,
    *,
    color: bool = False,
    cwd: str | None = None,
    registry: ChildRegistry | None = None,
) -> None:
    registry = registry or default_registry
    sys.stdout.flush()
    sys.stderr.flush()

    proc = subprocess.Popen(command, shell=True, cwd=cwd, env=process_env(color))
    registry.register(proc)
    logger.debug("Spawned pid %d: %s", proc.pid, command)

    returncode = proc.wait()
    registry.discard(proc)

    if returncode != 0:
        raise CommandFailedError(command, returncode)


async def _pump(
    stream: asyncio.StreamReader,
    sink_name: str,
    ready_when: str | None,
    ready: asyncio.Future[bool],
) -> None:
    # Decoded text is only used to look for the marker; output is copied as bytes.
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    # Keeps a marker split across two reads detectable.
    tail = ""

    while True:
        chunk = await stream.read(_CHUNK_SIZE)
        if not chunk:
            break

        _write(sink_name, chunk)

        if ready_when and not ready.done():
            text = decoder.decode(chunk)
            window = tail + text
            if ready_when in window:
                ready.set_result(True)
            tail = window[-(len(ready_when) - 1) :] if len(ready_when) > 1 else ""


async def _wait_for_exit(
    proc: asyncio.subprocess.Process,
    pumps: list[asyncio.Task],
    registry: ChildRegistry,
) -> int:
    await asyncio.gather(*pumps)
    returncode = await proc.wait()
    registry.discard(proc)
    return returncode


def _write(sink_name: str, chunk: bytes) -> None:
    sink = getattr(sys, sink_name)
    buffer = getattr(sink, "buffer", None)
    if buffer is None:
        # text-only replacement stream, e.g. an in-memory StringIO
        sink.write(chunk.decode("utf-8", errors="replace"))
        sink.flush()
        return
    sink.flush()
    buffer.write(chunk)
    buffer.flush()
