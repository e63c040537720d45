from .executor import execute, run_commands
from .pool import run_pool
from .process import ChildRegistry, default_registry, run_blocking, run_process
from .types import CommandFailedError, CommandOutcome, RunCommandsError, RunResult, TaskResult

__all__ = [
    "execute",
    "run_commands",
    "run_pool",
    "run_process",
    "run_blocking",
    "ChildRegistry",
    "default_registry",
    "RunResult",
    "TaskResult",
    "CommandOutcome",
    "CommandFailedError",
    "RunCommandsError",
]
