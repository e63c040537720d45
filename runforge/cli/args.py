from __future__ import annotations

import argparse


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="runforge")

    parser.add_argument(
        "--config",
        default="runforge.yml",
        help="Path to config file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug information to stderr",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
    )

    # run
    run = subparsers.add_parser("run", help="Run the commands of a target")
    run.add_argument("target", help="Target id")
    run.add_argument(
        "extra",
        nargs=argparse.REMAINDER,
        help="Arguments forwarded to the commands, replacing the target's 'args'",
    )
    run.add_argument(
        "--no-wait",
        action="store_true",
        help="Do not wait for commands still running once the outcome is known",
    )

    # list
    subparsers.add_parser("list", help="List targets")

    # show
    show = subparsers.add_parser("show", help="Show the resolved commands of a target")
    show.add_argument("target", help="Target id")

    return parser
