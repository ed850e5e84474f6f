from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from lib_effective_config.application.sanitizer import DEFAULT_KEYS_TO_SANITIZE, MASK, Sanitizer
from lib_effective_config.domain.errors import InvalidPattern


@pytest.mark.parametrize("key", ["dbPassword", "apiKey", "mySecret", "myCredentials", "VCAP_SERVICES", "auth.token"])
def test_default_patterns_mask_secret_shaped_keys(key: str) -> None:
    assert Sanitizer().sanitize(key, "123456") == MASK


@pytest.mark.parametrize("key", ["server.port", "password.policy", "keystore.type", "greeting"])
def test_default_patterns_leave_other_keys(key: str) -> None:
    assert Sanitizer().sanitize(key, "value") == "value"


def test_mask_is_six_asterisks() -> None:
    assert MASK == "******"


def test_set_keys_replaces_whole_set() -> None:
    sanitizer = Sanitizer()
    sanitizer.set_keys_to_sanitize("port")
    assert sanitizer.keys_to_sanitize == ("port",)
    assert sanitizer.sanitize("server.port", 8080) == MASK
    assert sanitizer.sanitize("dbPassword", "hunter2") == "hunter2"


def test_add_keys_extends_set() -> None:
    sanitizer = Sanitizer()
    sanitizer.add_keys_to_sanitize("port")
    assert sanitizer.keys_to_sanitize == (*DEFAULT_KEYS_TO_SANITIZE, "port")
    assert sanitizer.sanitize("server.port", 8080) == MASK
    assert sanitizer.sanitize("dbPassword", "hunter2") == MASK


def test_constructor_overrides_defaults() -> None:
    sanitizer = Sanitizer(["^internal\\..*"])
    assert sanitizer.sanitize("internal.url", "x") == MASK
    assert sanitizer.sanitize("public.internal.url", "x") == "x"
    assert sanitizer.sanitize("dbPassword", "x") == "x"


def test_regex_pattern_must_match_whole_key() -> None:
    sanitizer = Sanitizer(["db.*url$"])
    assert sanitizer.sanitize("DB.primary.URL", "x") == MASK
    assert sanitizer.sanitize("app.db.url", "x") == "x"


def test_invalid_regex_fails_at_configuration_time() -> None:
    sanitizer = Sanitizer()
    with pytest.raises(InvalidPattern):
        sanitizer.set_keys_to_sanitize("(unclosed*")
    assert sanitizer.keys_to_sanitize == DEFAULT_KEYS_TO_SANITIZE


def test_empty_pattern_set_masks_nothing() -> None:
    assert Sanitizer([]).sanitize("password", "x") == "x"


@given(st.text(max_size=10), st.one_of(st.none(), st.integers(), st.text(max_size=5)))
def test_matching_keys_are_masked_regardless_of_value(prefix: str, value: object) -> None:
    assert Sanitizer().sanitize(prefix + "Password", value) == MASK


def test_jvm_only_defaults_are_not_carried() -> None:
    assert Sanitizer().sanitize("sun.java.command", "java -jar app.jar") == "java -jar app.jar"
