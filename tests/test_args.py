import pytest

from runforge.config.args import parse_args_string
from runforge.config.types import OptionsError


def test_key_equals_value():
    assert parse_args_string("--name=x --count=3") == {"name": "x", "count": "3"}


def test_key_space_value():
    assert parse_args_string("--name x") == {"name": "x"}


def test_bare_flag_is_true():
    assert parse_args_string("--watch --prod") == {"watch": "true", "prod": "true"}


def test_negated_flag_is_false():
    assert parse_args_string("--no-watch") == {"watch": "false"}


def test_dashed_key_gets_camel_alias():
    assert parse_args_string("--dev-port=4200") == {"dev-port": "4200", "devPort": "4200"}


def test_short_flags():
    assert parse_args_string("-v -p 80") == {"v": "true", "p": "80"}
    assert parse_args_string("-abc") == {"a": "true", "b": "true", "c": "true"}


def test_positionals_and_tail_are_ignored():
    assert parse_args_string("build --a=1 -- --b=2") == {"a": "1"}


def test_surrounding_quotes_are_stripped():
    assert parse_args_string('"--a=1 --b=2"') == {"a": "1", "b": "2"}


def test_quoted_values_keep_spaces():
    assert parse_args_string("--msg='hello world'") == {"msg": "hello world"}


def test_empty_string():
    assert parse_args_string("") == {}


def test_unbalanced_quote_is_a_config_error():
    with pytest.raises(OptionsError) as e:
        parse_args_string('--name="x')
    assert str(e.value).startswith("ERROR: Bad config for run-commands - invalid args string:")
    assert isinstance(e.value.__cause__, ValueError)
