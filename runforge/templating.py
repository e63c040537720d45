"""Turn a configured command into the final shell string.

A command either references arguments explicitly through ``{args.<name>}``
placeholders, or receives every resolved argument as a trailing
``--key=value`` flag.
"""

from __future__ import annotations

import re
from typing import Mapping

_PLACEHOLDER = re.compile(r"{args\.([^}]+)}")
_DASH_CHAR = re.compile(r"-(.)")

# Rendered for placeholders naming an argument that was never passed.
MISSING_ARG = "undefined"


def camel_case(name: str) -> str:
    """Camel-normalize a dashed key, leaving names with an early dash alone.

    Only names whose first dash sits past the second character are rewritten,
    so ``max-size`` becomes ``maxSize`` while ``a-b`` and ``-x`` are returned
    unchanged.
    """
    if name.find("-") > 1:
        return _DASH_CHAR.sub(lambda m: m.group(1).upper(), name.lower())
    return name


def render_command(command: str, args: Mapping[str, str], forward_all_args: bool) -> str:
    if "{args." in command:
        return _PLACEHOLDER.sub(
            lambda m: str(args.get(camel_case(m.group(1)), MISSING_ARG)), command
        )

    if forward_all_args and args:
        forwarded = " ".join(f"--{key}={value}" for key, value in args.items())
        return f"{command} {forwarded}"

    return command
