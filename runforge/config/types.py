from dataclasses import dataclass, field
from typing import Any, Mapping

OPTIONS_ERROR_PREFIX = "ERROR: Bad config for run-commands - "
ENV_FILE_ERROR_PREFIX = "ERROR: Bad env file for run-commands - "


@dataclass(frozen=True)
class CommandSpec:
    command: str
    forward_all_args: bool = True


@dataclass(frozen=True)
class ExecutionOptions:
    commands: tuple[CommandSpec, ...]
    parallel: bool = False
    max_parallel: int | None = None
    ready_when: str | None = None
    cwd: str | None = None
    color: bool = False
    args: dict[str, str] = field(default_factory=dict)
    env_file: str | None = None
    output_path: str | None = None

    @property
    def mode(self) -> str:
        if not self.parallel:
            return "serial"
        if self.ready_when:
            return f"race(readyWhen={self.ready_when})"
        if self.max_parallel:
            return f"parallel(max={self.max_parallel})"
        return "parallel"


@dataclass
class TargetConfig:
    id: str
    options: Mapping[str, Any]


@dataclass
class ProjectConfig:
    targets: dict[str, TargetConfig]

    def __iter__(self):
        for target_id in sorted(self.targets):
            yield self.targets[target_id]

    def __len__(self):
        return len(self.targets)

    def has_target(self, id: str) -> bool:
        return id in self.targets

    def get_target(self, id: str) -> TargetConfig:
        if not self.has_target(id):
            raise KeyError(id)

        return self.targets[id]

    def target_ids(self) -> list[str]:
        return sorted(self.targets.keys())


class ConfigError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class UnsupportedConfigFormatError(ConfigError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class OptionsError(ConfigError):
    def __init__(self, message: str) -> None:
        super().__init__(OPTIONS_ERROR_PREFIX + message)


class EnvFileError(ConfigError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(ENV_FILE_ERROR_PREFIX + f"unable to load {path}: {reason}")
        self.path = path
