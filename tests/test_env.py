from __future__ import annotations

import os
from pathlib import Path

import pytest

from runforge.config.env import load_env_file
from runforge.config.types import EnvFileError


@pytest.fixture(autouse=True)
def isolated_environ(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(os, "environ", dict(os.environ))


def test_explicit_file_is_loaded(tmp_path: Path) -> None:
    env_file = tmp_path / "custom.env"
    env_file.write_text("RUNFORGE_A=1\nRUNFORGE_B=two\n", encoding="utf-8")

    load_env_file(str(env_file))

    assert os.environ["RUNFORGE_A"] == "1"
    assert os.environ["RUNFORGE_B"] == "two"


def test_existing_variables_are_not_overridden(tmp_path: Path) -> None:
    os.environ["RUNFORGE_A"] = "kept"
    env_file = tmp_path / "custom.env"
    env_file.write_text("RUNFORGE_A=replaced\n", encoding="utf-8")

    load_env_file(str(env_file))

    assert os.environ["RUNFORGE_A"] == "kept"


def test_missing_explicit_file_raises(tmp_path: Path) -> None:
    with pytest.raises(EnvFileError) as e:
        load_env_file(str(tmp_path / "nope.env"))
    assert e.value.path == str(tmp_path / "nope.env")
    assert str(e.value) == (
        f"ERROR: Bad env file for run-commands - unable to load {tmp_path / 'nope.env'}: "
        "file not found"
    )


def test_default_dotenv_in_cwd_is_loaded(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / ".env").write_text("RUNFORGE_DEFAULT=yes\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    load_env_file()

    assert os.environ["RUNFORGE_DEFAULT"] == "yes"


def test_missing_default_dotenv_is_ignored(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    load_env_file()
    assert "RUNFORGE_DEFAULT" not in os.environ
