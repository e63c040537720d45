import json
import tomllib
from pathlib import Path
from typing import Any, Callable, Mapping

import yaml

from .types import ConfigError, ProjectConfig, TargetConfig, UnsupportedConfigFormatError


def load_project(path: str | Path) -> ProjectConfig:
    pure_path = Path(path).expanduser().resolve()

    if not pure_path.exists():
        raise ConfigError(f"Config file not found: {pure_path}")

    if not pure_path.is_file():
        raise ConfigError(f"Config path is not a file: {pure_path}")

    fmt = _detect_format(pure_path)
    raw_file = _parse_file(pure_path, fmt)
    return _build_project_config(raw_file)


def _detect_format(path: Path) -> str:
    fmt = path.suffix
    match fmt:
        case ".yaml" | ".yml":
            return "yaml"
        case ".toml":
            return "toml"
        case ".json":
            return "json"
        case _:
            raise UnsupportedConfigFormatError(
                f"Non supported file extension: {fmt}\n Expected format: .yml/.yaml, .toml, .json"
            )


_PARSERS: dict[str, tuple[Callable[[str], Any], tuple[type[Exception], ...]]] = {
    "yaml": (yaml.safe_load, (yaml.YAMLError,)),
    "toml": (tomllib.loads, (tomllib.TOMLDecodeError,)),
    "json": (json.loads, (json.JSONDecodeError,)),
}


def _parse_file(path: Path, fmt: str) -> Mapping[str, Any]:
    if fmt not in _PARSERS:
        raise AssertionError("Unreachable")

    loads, errors = _PARSERS[fmt]
    try:
        raw_file = loads(path.read_text(encoding="utf-8"))
    except errors as exc:
        raise ConfigError(f"{path}: invalid {fmt.upper()}") from exc

    if not isinstance(raw_file, Mapping):
        raise ConfigError(
            f"{path}: {fmt.upper()} parsed successfully but top-level value is not an object: {type(raw_file)}"
        )

    return raw_file


def _build_project_config(raw: Mapping[str, Any]) -> ProjectConfig:
    targets: dict[str, TargetConfig] = {}

    if "targets" not in raw:
        raise ConfigError("Missing 'targets' field")

    if not isinstance(raw["targets"], Mapping):
        raise ConfigError(f"'targets' must be a mapping, got {type(raw['targets'])}")

    if len(raw["targets"]) < 1:
        raise ConfigError("There must be at least one target in the config file")

    for target_id, options in raw["targets"].items():
        if not isinstance(target_id, str):
            raise ConfigError(f"Target id must be a string, got {type(target_id)}")

        if not isinstance(options, Mapping):
            raise ConfigError(f"{target_id} must be a mapping")

        target_id_norm = target_id.strip()

        if len(target_id_norm) < 1:
            raise ConfigError("A target id can't be empty")

        if target_id_norm in targets:
            raise ConfigError(f"Duplicate target id after normalization: {target_id_norm}")

        if "command" not in options and "commands" not in options:
            raise ConfigError(f"{target_id_norm}: missing 'command' or 'commands'")

        targets[target_id_norm] = TargetConfig(target_id_norm, dict(options))

    return ProjectConfig(targets=targets)
