from .args import parse_args_string
from .env import load_env_file
from .loader import load_project
from .options import normalize_options, validate_options
from .types import (
    CommandSpec,
    ConfigError,
    EnvFileError,
    ExecutionOptions,
    OptionsError,
    ProjectConfig,
    TargetConfig,
)

__all__ = [
    "load_project",
    "load_env_file",
    "normalize_options",
    "validate_options",
    "parse_args_string",
    "CommandSpec",
    "ExecutionOptions",
    "ProjectConfig",
    "TargetConfig",
    "ConfigError",
    "OptionsError",
    "EnvFileError",
]
