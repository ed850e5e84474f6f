"""Placeholder resolution with sanitisation of referenced keys.

Purpose
-------
Expand ``${name}`` and ``${name:default}`` references inside raw string values
by looking ``name`` up in the property sources, so a report shows the value the
application would actually see.

Contents
    - ``PREFIX`` / ``SUFFIX`` / ``VALUE_SEPARATOR``: placeholder syntax.
    - ``MAX_DEPTH``: hard bound on nested resolution.
    - ``PlaceholderResolver``: the resolver itself.

Rules
-----
* Non-string values pass through untouched.
* Placeholders may nest inside an expression (``${db.${profile}.url}``); the
  inner one is resolved first.
* The whole expression is looked up first; failing that, the part before the
  first ``:`` is looked up and the remainder is the default.
* A substituted value is sanitised with the *referenced* key before it is
  itself resolved, so secrets stay masked when pulled in from elsewhere.
* Missing references without a default, cycles, placeholders nested deeper than
  :data:`MAX_DEPTH`, and an unterminated ``${`` all stay as literal text.
"""

from __future__ import annotations

from typing import Any, Callable, Final

from ..observability import log_debug, make_event
from .sanitizer import Sanitizer

PREFIX: Final[str] = "${"
SUFFIX: Final[str] = "}"
VALUE_SEPARATOR: Final[str] = ":"
MAX_DEPTH: Final[int] = 32

_SIMPLE_PREFIX: Final[str] = "{"

Lookup = Callable[[str], Any]


class PlaceholderResolver:
    """Resolve placeholders against a lookup callable.

    Examples
    --------
    >>> values = {"name": "World", "db.password": "s3cret"}
    >>> resolver = PlaceholderResolver(Sanitizer())
    >>> resolver.resolve("Hello ${name}", values.get)
    'Hello World'
    >>> resolver.resolve("Hello ${missing}", values.get)
    'Hello ${missing}'
    >>> resolver.resolve("Hello ${missing:you}", values.get)
    'Hello you'
    >>> resolver.resolve("jdbc://admin:${db.password}@db", values.get)
    'jdbc://admin:******@db'
    >>> resolver.resolve(42, values.get)
    42
    """

    def __init__(self, sanitizer: Sanitizer) -> None:
        self._sanitizer = sanitizer

    def resolve(self, raw_value: Any, lookup: Lookup, *, key: str | None = None) -> Any:
        """Return *raw_value* with placeholders expanded.

        When *key* names the property being resolved, references back to it are
        treated as a cycle straight away.
        """

        if not isinstance(raw_value, str):
            return raw_value
        visiting = frozenset() if key is None else frozenset({key})
        return self._parse(raw_value, lookup, visiting, 0)

    def _parse(self, text: str, lookup: Lookup, visiting: frozenset[str], depth: int) -> str:
        start = text.find(PREFIX)
        if start == -1:
            return text

        parts: list[str] = []
        cursor = 0
        while start != -1:
            end = _find_placeholder_end(text, start)
            if end == -1:
                break
            parts.append(text[cursor:start])
            expression = text[start + len(PREFIX) : end]
            replacement = self._replace(expression, lookup, visiting, depth)
            parts.append(text[start : end + len(SUFFIX)] if replacement is None else replacement)
            cursor = end + len(SUFFIX)
            start = text.find(PREFIX, cursor)
        parts.append(text[cursor:])
        return "".join(parts)

    def _replace(self, expression: str, lookup: Lookup, visiting: frozenset[str], depth: int) -> str | None:
        """Return the fully resolved replacement for ``${expression}`` or ``None`` to keep it literal."""

        if depth >= MAX_DEPTH:
            log_debug("placeholder_depth_exceeded", **make_event(None, expression, {"depth": depth}))
            return None

        name = self._parse(expression, lookup, visiting, depth + 1)
        if name in visiting:
            return _cycle(name)
        value = _lookup_text(name, lookup)
        default: str | None = None
        if value is None and VALUE_SEPARATOR in name:
            name, default = name.split(VALUE_SEPARATOR, 1)
            if name in visiting:
                return _cycle(name)
            value = _lookup_text(name, lookup)

        if value is not None:
            value = str(self._sanitizer.sanitize(name, value))
        elif default is not None:
            value = default
        else:
            log_debug("placeholder_unresolved", **make_event(None, name))
            return None
        return self._parse(value, lookup, visiting | {name}, depth + 1)


def _lookup_text(name: str, lookup: Lookup) -> str | None:
    """Look *name* up and render the raw value as text."""

    value = lookup(name)
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _cycle(name: str) -> None:
    log_debug("placeholder_cycle", **make_event(None, name))
    return None


def _find_placeholder_end(text: str, start: int) -> int:
    """Return the index of the ``}`` closing the placeholder at *start*, or ``-1``.

    Examples
    --------
    >>> _find_placeholder_end("${a${b}}", 0)
    7
    >>> _find_placeholder_end("${open", 0)
    -1
    """

    index = start + len(PREFIX)
    nested = 0
    while index < len(text):
        if text.startswith(SUFFIX, index):
            if nested == 0:
                return index
            nested -= 1
            index += len(SUFFIX)
        elif text.startswith(_SIMPLE_PREFIX, index):
            nested += 1
            index += len(_SIMPLE_PREFIX)
        else:
            index += 1
    return -1
