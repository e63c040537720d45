from __future__ import annotations

import argparse
import logging
import shlex
import sys

from runforge.config import ConfigError, load_project, normalize_options
from runforge.executor import RunCommandsError, execute

from .args import build_parser


def run_cli(argv: list[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        _configure_logging(args.verbose)

        match args.command:
            case "run":
                return cmd_run(args)
            case "list":
                return cmd_list(args)
            case "show":
                return cmd_show(args)
            case _:
                return 2

    except ConfigError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    except KeyError as exc:
        print(f"Unknown target: {exc.args[0]}", file=sys.stderr)
        return 2

    except RunCommandsError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        return 130


def cmd_run(args: argparse.Namespace) -> int:
    project = load_project(args.config)
    target = project.get_target(args.target)
    options = dict(target.options)

    extra = _forwarded(args.extra)
    if extra:
        options["args"] = shlex.join(extra)

    result = execute(options, wait=not args.no_wait)
    print(f"{'OK' if result.success else 'FAIL'} {target.id}")
    return 0 if result.success else 1


def cmd_list(args: argparse.Namespace) -> int:
    project = load_project(args.config)
    for target_id in project.target_ids():
        print(target_id)
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    project = load_project(args.config)
    options = normalize_options(project.get_target(args.target).options)
    print(options.mode)
    for spec in options.commands:
        print(spec.command)
    return 0


def _forwarded(extra: list[str]) -> list[str]:
    if extra and extra[0] == "--":
        return extra[1:]
    return extra


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )
