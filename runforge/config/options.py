from __future__ import annotations

from typing import Any, Mapping

from runforge.templating import camel_case, render_command

from .args import parse_args_string
from .types import CommandSpec, ExecutionOptions, OptionsError

OPTION_KEYS = (
    "command",
    "commands",
    "color",
    "parallel",
    "maxParallel",
    "readyWhen",
    "cwd",
    "args",
    "envFile",
    "outputPath",
)


def normalize_options(raw: Mapping[str, Any]) -> ExecutionOptions:
    args = resolve_args(raw)
    parallel = bool(raw.get("parallel", False))

    if raw.get("command") is not None:
        if not isinstance(raw["command"], str):
            raise OptionsError("'command' should be a string")
        specs = [CommandSpec(raw["command"])]
        parallel = False
    elif raw.get("commands") is not None:
        specs = _command_specs(raw["commands"])
    else:
        raise OptionsError("either 'command' or 'commands' is required")

    rendered = tuple(
        CommandSpec(
            render_command(spec.command, args, spec.forward_all_args),
            spec.forward_all_args,
        )
        for spec in specs
    )

    return ExecutionOptions(
        commands=rendered,
        parallel=parallel,
        max_parallel=_max_parallel(raw.get("maxParallel")),
        ready_when=_optional_str(raw, "readyWhen"),
        cwd=_optional_str(raw, "cwd"),
        color=bool(raw.get("color", False)),
        args=args,
        env_file=_optional_str(raw, "envFile"),
        output_path=_optional_str(raw, "outputPath"),
    )


def validate_options(options: ExecutionOptions) -> None:
    if options.ready_when and not options.parallel:
        raise OptionsError('"readyWhen" can only be used when parallel=true')

    if options.max_parallel and not options.parallel:
        raise OptionsError('"maxParallel" can only be used when parallel=true')


def resolve_args(raw: Mapping[str, Any]) -> dict[str, str]:
    """Build the argument map commands are rendered against.

    An explicit ``args`` string wins; otherwise unknown top-level options are
    treated as arguments.
    """
    args = raw.get("args")
    if args:
        if not isinstance(args, str):
            raise OptionsError("'args' should be a string")
        return parse_args_string(args)

    return {
        camel_case(str(key)): _stringify(value)
        for key, value in raw.items()
        if key not in OPTION_KEYS
    }


def _command_specs(commands: Any) -> list[CommandSpec]:
    if not isinstance(commands, list):
        raise OptionsError("'commands' should be a list")

    specs = []
    for item in commands:
        if isinstance(item, str):
            specs.append(CommandSpec(item))
            continue

        if not isinstance(item, Mapping):
            raise OptionsError(f"{item!r} should be a string or a mapping")

        command = item.get("command")
        if not isinstance(command, str):
            raise OptionsError(f"{item!r}: 'command' should be a string")

        forward = item.get("forwardAllArgs", True)
        if not isinstance(forward, bool):
            raise OptionsError(f"{command}: 'forwardAllArgs' should be a boolean")

        specs.append(CommandSpec(command, forward))

    return specs


def _max_parallel(value: Any) -> int | None:
    # bool is an int subclass
    if value is not None and (isinstance(value, bool) or not isinstance(value, int) or value < 0):
        raise OptionsError(f"'maxParallel' should be a non-negative integer, got {value!r}")
    # 0 means no ceiling
    return value or None


def _optional_str(raw: Mapping[str, Any], key: str) -> str | None:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise OptionsError(f"'{key}' should be a string")
    return value


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
