from __future__ import annotations

import pytest

from runforge.config.options import normalize_options, validate_options
from runforge.config.types import CommandSpec, OptionsError


def test_single_command_forces_serial():
    options = normalize_options({"command": "echo hi", "parallel": True})
    assert options.commands == (CommandSpec("echo hi"),)
    assert options.parallel is False
    assert options.mode == "serial"


def test_commands_accept_strings_and_mappings():
    options = normalize_options(
        {
            "commands": ["echo a", {"command": "echo b", "forwardAllArgs": False}],
            "parallel": True,
            "args": "--x=1",
        }
    )
    assert options.commands == (
        CommandSpec("echo a --x=1"),
        CommandSpec("echo b", forward_all_args=False),
    )
    assert options.args == {"x": "1"}


def test_unknown_options_become_args_when_args_absent():
    options = normalize_options({"command": "echo hi", "env-name": "prod", "dry": True})
    assert options.args == {"envName": "prod", "dry": "true"}
    assert options.commands[0].command == "echo hi --envName=prod --dry=true"


def test_args_string_wins_over_unknown_options():
    options = normalize_options({"command": "echo {args.who}", "args": "--who=me", "who": "you"})
    assert options.commands[0].command == "echo me"


def test_mode_names():
    assert normalize_options({"commands": [], "parallel": True}).mode == "parallel"
    assert (
        normalize_options({"commands": [], "parallel": True, "maxParallel": 2}).mode
        == "parallel(max=2)"
    )
    assert (
        normalize_options({"commands": [], "parallel": True, "readyWhen": "up"}).mode
        == "race(readyWhen=up)"
    )


def test_missing_commands_raises():
    with pytest.raises(OptionsError):
        normalize_options({"parallel": True})


@pytest.mark.parametrize(
    "raw",
    [
        {"commands": "echo hi"},
        {"commands": [1]},
        {"commands": [{"forwardAllArgs": True}]},
        {"commands": [{"command": "echo", "forwardAllArgs": "yes"}]},
        {"command": 3},
        {"commands": [], "parallel": True, "maxParallel": -1},
        {"commands": [], "parallel": True, "maxParallel": True},
        {"commands": [], "cwd": 1},
        {"commands": [], "args": ["--a"]},
    ],
)
def test_malformed_options_raise(raw: dict) -> None:
    with pytest.raises(OptionsError):
        normalize_options(raw)


def test_ready_when_requires_parallel():
    options = normalize_options({"commands": ["echo a"], "readyWhen": "x", "parallel": False})
    with pytest.raises(OptionsError) as e:
        validate_options(options)
    assert str(e.value) == (
        'ERROR: Bad config for run-commands - "readyWhen" can only be used when parallel=true'
    )


def test_max_parallel_requires_parallel():
    options = normalize_options({"commands": ["echo a"], "maxParallel": 2, "parallel": False})
    with pytest.raises(OptionsError) as e:
        validate_options(options)
    assert '"maxParallel" can only be used when parallel=true' in str(e.value)


def test_zero_max_parallel_means_unbounded():
    options = normalize_options({"commands": ["echo a"], "maxParallel": 0, "parallel": False})
    validate_options(options)
    assert options.max_parallel is None
    assert options.mode == "serial"

    parallel = normalize_options({"commands": ["echo a"], "maxParallel": 0, "parallel": True})
    assert parallel.max_parallel is None
    assert parallel.mode == "parallel"


def test_single_command_with_ready_when_is_rejected():
    options = normalize_options({"command": "echo a", "readyWhen": "x", "parallel": True})
    with pytest.raises(OptionsError):
        validate_options(options)


def test_valid_parallel_options_pass():
    options = normalize_options(
        {"commands": ["echo a"], "parallel": True, "maxParallel": 2, "cwd": "/tmp"}
    )
    validate_options(options)
    assert options.max_parallel == 2
    assert options.cwd == "/tmp"
