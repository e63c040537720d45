from __future__ import annotations

import asyncio
import logging

from runforge.config import CommandSpec, ExecutionOptions

from .pool import run_pool
from .process import ChildRegistry, run_blocking, run_process
from .types import CommandOutcome

logger = logging.getLogger(__name__)


def run_serially(options: ExecutionOptions, registry: ChildRegistry) -> bool:
    for spec in options.commands:
        run_blocking(spec.command, color=options.color, cwd=options.cwd, registry=registry)
    return True


async def run_in_parallel(options: ExecutionOptions, registry: ChildRegistry) -> bool:
    async def launch(spec: CommandSpec, _index: int) -> CommandOutcome:
        return await _outcome(spec, None, options, registry)

    outcomes = await run_pool(list(options.commands), launch, options.max_parallel)

    failed = [outcome for outcome in outcomes if not outcome.ok]
    for outcome in failed:
        _warn(outcome)
    return not failed


async def run_race(options: ExecutionOptions, registry: ChildRegistry) -> bool:
    """Settle on the first command to print the ready marker; the rest keep running.

    A command that exits without printing the marker does not decide the race.
    Only when every command has exited that way is the outcome ``False``.
    """
    if not options.commands:
        return True

    tasks = [
        asyncio.create_task(_outcome(spec, options.ready_when, options, registry))
        for spec in options.commands
    ]
    for task in tasks:
        registry.track(task)

    pending = set(tasks)
    unready: list[CommandOutcome] = []
    while pending:
        done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
        # ties go to the earliest command in input order
        for task in (t for t in tasks if t in done):
            outcome = task.result()
            if outcome.ok:
                return True
            unready.append(outcome)

    for outcome in unready:
        logger.warning(
            'run-commands command "%s" exited without printing "%s"',
            outcome.command,
            options.ready_when,
        )
    return False


async def _outcome(
    spec: CommandSpec,
    ready_when: str | None,
    options: ExecutionOptions,
    registry: ChildRegistry,
) -> CommandOutcome:
    ok = await run_process(
        spec.command,
        ready_when,
        color=options.color,
        cwd=options.cwd,
        registry=registry,
    )
    return CommandOutcome(spec.command, ok)


def _warn(outcome: CommandOutcome) -> None:
    logger.warning('run-commands command "%s" exited with non-zero status code', outcome.command)
