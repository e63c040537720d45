"""Parsing of the ``args`` option into the map used for command templating."""

from __future__ import annotations

import re
import shlex

from .types import OptionsError

_DASH_CHAR = re.compile(r"-(.)")


def _expand_alias(key: str) -> str:
    return _DASH_CHAR.sub(lambda m: m.group(1).upper(), key)


def _store(parsed: dict[str, str], key: str, value: str) -> None:
    parsed[key] = value
    if "-" in key.strip("-"):
        alias = _expand_alias(key)
        if alias != key:
            parsed[alias] = value


def parse_args_string(text: str) -> dict[str, str]:
    """Parse a CLI-style argument string into an ordered key/value map.

    Positional tokens are dropped; everything after a bare ``--`` is ignored.
    """
    text = text.strip()
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        text = text[1:-1]

    try:
        tokens = shlex.split(text)
    except ValueError as exc:
        raise OptionsError(f"invalid args string: {exc}") from exc
    parsed: dict[str, str] = {}
    i = 0

    while i < len(tokens):
        token = tokens[i]
        i += 1

        if token == "--":
            break

        if token.startswith("--"):
            body = token[2:]
            if "=" in body:
                key, value = body.split("=", 1)
                _store(parsed, key, value)
            elif body.startswith("no-") and len(body) > 3:
                _store(parsed, body[3:], "false")
            elif i < len(tokens) and not tokens[i].startswith("-"):
                _store(parsed, body, tokens[i])
                i += 1
            else:
                _store(parsed, body, "true")
            continue

        if token.startswith("-") and len(token) > 1:
            flags = token[1:]
            if "=" in flags:
                key, value = flags.split("=", 1)
                parsed[key] = value
            elif len(flags) == 1 and i < len(tokens) and not tokens[i].startswith("-"):
                parsed[flags] = tokens[i]
                i += 1
            else:
                for flag in flags:
                    parsed[flag] = "true"

    return parsed
