"""Placeholder expansion, defaults, cycles and sanitisation of referenced keys."""

from __future__ import annotations

import logging

import pytest
from hypothesis import given
from hypothesis import strategies as st

from lib_effective_config.application.placeholders import MAX_DEPTH, PlaceholderResolver
from lib_effective_config.application.sanitizer import MASK, Sanitizer


def _resolve(raw: object, values: dict[str, object], *, key: str | None = None) -> object:
    return PlaceholderResolver(Sanitizer()).resolve(raw, values.get, key=key)


def test_simple_reference() -> None:
    assert _resolve("Hello ${name}", {"name": "World"}) == "Hello World"


def test_missing_reference_stays_literal() -> None:
    assert _resolve("Hello ${missing}", {}) == "Hello ${missing}"


def test_default_used_when_missing() -> None:
    assert _resolve("${port:8080}", {}) == "8080"
    assert _resolve("${port:8080}", {"port": 9090}) == "9090"


def test_empty_default() -> None:
    assert _resolve("[${missing:}]", {}) == "[]"


def test_default_can_contain_placeholders() -> None:
    assert _resolve("${missing:${fallback}}", {"fallback": "ok"}) == "ok"


def test_whole_expression_is_tried_before_default_split() -> None:
    assert _resolve("${a:b}", {"a:b": "whole", "a": "part"}) == "whole"


def test_recursive_references() -> None:
    values = {"url": "http://${host}:${port}", "host": "${name}.local", "name": "db", "port": 5432}
    assert _resolve("${url}/api", values) == "http://db.local:5432/api"


def test_nested_placeholder_in_name() -> None:
    values = {"profile": "prod", "db.prod.url": "jdbc:prod"}
    assert _resolve("${db.${profile}.url}", values) == "jdbc:prod"


def test_non_string_values_pass_through() -> None:
    marker = object()
    assert _resolve(42, {}) == 42
    assert _resolve(None, {}) is None
    assert _resolve(marker, {}) is marker
    assert _resolve(["${name}"], {"name": "x"}) == ["${name}"]


def test_non_string_referenced_values_render_as_text() -> None:
    assert _resolve("${flag}/${count}", {"flag": True, "count": 3}) == "true/3"


def test_unterminated_placeholder_is_literal() -> None:
    assert _resolve("Hello ${name", {"name": "World"}) == "Hello ${name"
    assert _resolve("${name} and ${open", {"name": "World"}) == "World and ${open"


def test_text_without_placeholders_unchanged() -> None:
    assert _resolve("plain $ { } text", {}) == "plain $ { } text"


def test_referenced_secret_is_masked_by_referenced_key() -> None:
    values = {"dbPassword": "s3cret"}
    assert _resolve("jdbc://admin:${dbPassword}@db", values) == f"jdbc://admin:{MASK}@db"


def test_masked_value_is_not_expanded_further() -> None:
    values = {"api.token": "${other}", "other": "visible"}
    assert _resolve("${api.token}", values) == MASK


def test_default_value_is_not_masked() -> None:
    assert _resolve("${dbPassword:fallback}", {}) == "fallback"


def test_two_key_cycle_terminates_with_literal(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="lib_effective_config")
    values = {"a": "${b}", "b": "${a}"}
    assert _resolve("${a}", values) == "${a}"
    assert any(record.getMessage() == "placeholder_cycle" for record in caplog.records)


def test_self_reference_of_described_key_is_a_cycle() -> None:
    assert _resolve("x${a}", {"a": "x${a}"}, key="a") == "x${a}"


def test_cycle_through_default_terminates() -> None:
    assert _resolve("${a:${a}}", {}) == "${a}"


def test_depth_is_bounded() -> None:
    values = {f"k{index}": f"${{k{index + 1}}}" for index in range(MAX_DEPTH * 2)}
    result = _resolve("${k0}", values)
    assert isinstance(result, str)
    assert result.startswith("${k")


KEY = st.text(alphabet="abcdef.", min_size=1, max_size=6)


@given(st.dictionaries(KEY, st.one_of(KEY.map(lambda key: "${" + key + "}"), st.text(max_size=8)), max_size=6), KEY)
def test_resolution_always_terminates(values: dict[str, str], start: str) -> None:
    result = _resolve("${" + start + "}", values)
    assert isinstance(result, str)
