from dataclasses import dataclass
from typing import Generic, TypeVar

R = TypeVar("R")

WRAPPED_ERROR_PREFIX = "ERROR: Something went wrong in run-commands - "


@dataclass(frozen=True)
class TaskResult(Generic[R]):
    index: int
    value: R


@dataclass(frozen=True)
class CommandOutcome:
    command: str
    ok: bool


@dataclass(frozen=True)
class RunResult:
    success: bool


class CommandFailedError(Exception):
    def __init__(self, command: str, returncode: int) -> None:
        super().__init__(f"Command failed: {command}")
        self.command = command
        self.returncode = returncode


class RunCommandsError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(WRAPPED_ERROR_PREFIX + message)
