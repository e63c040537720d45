import asyncio
import logging
from typing import Any, Mapping

from runforge.config import load_env_file, normalize_options, validate_options

from .modes import run_in_parallel, run_race, run_serially
from .process import ChildRegistry, default_registry
from .types import RunCommandsError, RunResult

logger = logging.getLogger(__name__)


async def run_commands(
    raw: Mapping[str, Any], *, registry: ChildRegistry | None = None
) -> RunResult:
    """Run the commands described by a raw options mapping.

    Configuration problems raise ``ConfigError`` before anything is spawned.
    Failures while running are re-raised as ``RunCommandsError``.
    """
    registry = registry or default_registry
    options = normalize_options(raw)
    load_env_file(options.env_file)
    validate_options(options)

    logger.debug("Running %d command(s) in %s mode", len(options.commands), options.mode)
    try:
        if not options.parallel:
            success = run_serially(options, registry)
        elif options.ready_when:
            success = await run_race(options, registry)
        else:
            success = await run_in_parallel(options, registry)
    except Exception as exc:
        raise RunCommandsError(str(exc)) from exc

    return RunResult(success)


def execute(
    raw: Mapping[str, Any],
    *,
    registry: ChildRegistry | None = None,
    wait: bool = True,
) -> RunResult:
    """Blocking entry point.

    With ``wait``, children still running once the result is known (race
    losers, servers that printed their readiness marker) are waited for
    before returning. Whatever is still alive afterwards is terminated.
    """
    registry = registry or default_registry

    async def main() -> RunResult:
        result = await run_commands(raw, registry=registry)
        if wait:
            await registry.wait_detached()
        return result

    try:
        return asyncio.run(main())
    finally:
        registry.shutdown()
