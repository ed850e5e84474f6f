"""Key-pattern redaction policy.

Purpose
-------
Decide, from the key alone, whether a value may leave the library verbatim.
Values whose key looks like a secret are replaced by a fixed marker.

Contents
    - ``MASK``: the six-asterisk redaction marker.
    - ``DEFAULT_KEYS_TO_SANITIZE``: secret-shaped key patterns used by default.
    - ``Sanitizer``: compiled pattern set with ``sanitize``.

Pattern Semantics
-----------------
A pattern containing any of ``*``, ``$``, ``^`` or ``+`` is treated as a
regular expression that must match the whole key. Any other pattern matches
keys that end with it. Matching is always case-insensitive.

Thread Safety
-------------
Configure once, then share. Replacing or extending the pattern set while
another thread calls :meth:`Sanitizer.sanitize` needs external locking.
"""

from __future__ import annotations

import re
from typing import Any, Final, Iterable, Pattern

from ..domain.errors import InvalidPattern

MASK: Final[str] = "******"

DEFAULT_KEYS_TO_SANITIZE: Final[tuple[str, ...]] = (
    "password",
    "secret",
    "key",
    "token",
    ".*credentials.*",
    "vcap_services",
)

_REGEX_PARTS: Final[frozenset[str]] = frozenset("*$^+")


class Sanitizer:
    """Redact values whose keys match a configured pattern.

    Examples
    --------
    >>> sanitizer = Sanitizer()
    >>> sanitizer.sanitize("dbPassword", "hunter2")
    '******'
    >>> sanitizer.sanitize("server.port", 8080)
    8080
    >>> sanitizer.set_keys_to_sanitize("port")
    >>> sanitizer.sanitize("server.port", 8080), sanitizer.sanitize("dbPassword", "hunter2")
    ('******', 'hunter2')
    """

    def __init__(self, keys_to_sanitize: Iterable[str] | None = None) -> None:
        keys = DEFAULT_KEYS_TO_SANITIZE if keys_to_sanitize is None else tuple(keys_to_sanitize)
        self._keys: tuple[str, ...] = ()
        self._patterns: tuple[Pattern[str], ...] = ()
        self.set_keys_to_sanitize(*keys)

    @property
    def keys_to_sanitize(self) -> tuple[str, ...]:
        return self._keys

    def set_keys_to_sanitize(self, *keys: str) -> None:
        """Replace the whole pattern set with *keys*."""

        patterns = tuple(_compile(key) for key in keys)
        self._keys = tuple(keys)
        self._patterns = patterns

    def add_keys_to_sanitize(self, *keys: str) -> None:
        """Append *keys* to the current pattern set."""

        patterns = tuple(_compile(key) for key in keys)
        self._keys = (*self._keys, *keys)
        self._patterns = (*self._patterns, *patterns)

    def matches(self, key: str) -> bool:
        return any(pattern.fullmatch(key) for pattern in self._patterns)

    def sanitize(self, key: str, value: Any) -> Any:
        """Return :data:`MASK` when *key* matches a pattern, otherwise *value* unchanged."""

        if self.matches(key):
            return MASK
        return value


def _compile(key: str) -> Pattern[str]:
    """Compile *key* into a case-insensitive full-match pattern.

    Examples
    --------
    >>> bool(_compile("password").fullmatch("DB_PASSWORD"))
    True
    >>> bool(_compile("password").fullmatch("password.policy"))
    False
    >>> bool(_compile(".*credentials.*").fullmatch("myCredentialsFile"))
    True
    """

    if _is_regex(key):
        try:
            return re.compile(key, re.IGNORECASE)
        except re.error as exc:
            raise InvalidPattern(f"Invalid sanitize pattern {key!r}: {exc}") from exc
    return re.compile(".*" + re.escape(key), re.IGNORECASE | re.DOTALL)


def _is_regex(key: str) -> bool:
    return any(char in _REGEX_PARTS for char in key)
