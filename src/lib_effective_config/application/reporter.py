"""Precedence-aware property reporting.

Purpose
-------
Answer "which value is this service actually using" for every key, or for one
key, by walking a :class:`~lib_effective_config.application.collection.SourceCollection`
in precedence order.

Contents
    - ``PrecedenceReporter``: ``describe_all`` / ``describe_one`` /
      ``describe_sources``.
    - ``compile_filter``: turn an optional key filter into a predicate.

System Role
-----------
Receives a freshly built collection from :mod:`lib_effective_config.core`,
resolves placeholders through the whole collection, sanitises each value by its
own key, and returns domain value objects. Precedence is strictly positional:
the first enumerable source defining a key wins; later sources defining the same
key are ignored for that key.
"""

from __future__ import annotations

import re
from typing import Any, Callable

from ..domain.errors import InvalidPattern
from ..domain.report import PropertyValue, Report, ReportEntry, SourceDescriptor
from ..observability import log_debug, log_info, make_event
from .collection import FlatSource, SourceCollection
from .placeholders import PlaceholderResolver
from .sanitizer import Sanitizer


class PrecedenceReporter:
    """Build reports from a source collection.

    Examples
    --------
    >>> from lib_effective_config.application.collection import build_collection
    >>> from lib_effective_config.domain.sources import MapSource
    >>> collection = build_collection([
    ...     MapSource("priority", {"greeting": "Hello ${name}"}),
    ...     MapSource("fallback", {"greeting": "Hi", "name": "World"}),
    ... ])
    >>> reporter = PrecedenceReporter(Sanitizer())
    >>> [(e.key, e.value, e.source_name) for e in reporter.describe_all(collection)]
    [('greeting', 'Hello World', 'priority'), ('name', 'World', 'fallback')]
    >>> reporter.describe_one("missing", collection) is None
    True
    """

    def __init__(self, sanitizer: Sanitizer) -> None:
        self._sanitizer = sanitizer
        self._resolver = PlaceholderResolver(sanitizer)

    def describe_all(self, collection: SourceCollection, pattern: str | None = None) -> Report:
        """Return one entry per unique enumerable key, taken from its highest-precedence source.

        The winner is the first enumerable source that *contains* the key, which
        may be an earlier source than the one listing it (relaxed environment
        names, for instance).
        """

        include = compile_filter(pattern)
        sources = list(collection.enumerable())
        keys = dict.fromkeys(key for source in sources for key in source.property_names() if include(key))
        entries = []
        for key in keys:
            winner = next((source for source in sources if source.contains_property(key)), None)
            if winner is None:
                log_debug("property_vanished", **make_event(None, key))
                continue
            entries.append(self._describe(key, winner, collection))
        log_info("report_built", sources=len(collection), entries=len(entries), pattern=pattern)
        return Report(tuple(entries))

    def describe_one(self, key: str, collection: SourceCollection) -> ReportEntry | None:
        """Return the entry for *key* from the first enumerable source defining it, or ``None``."""

        return next(
            (self._describe(key, source, collection) for source in collection.enumerable() if source.contains_property(key)),
            None,
        )

    def describe_sources(self, collection: SourceCollection, pattern: str | None = None) -> tuple[SourceDescriptor, ...]:
        """Return every enumerable source with all of its values, shadowed ones included."""

        include = compile_filter(pattern)
        descriptors = []
        for source in collection.enumerable():
            properties = {
                key: PropertyValue(self._value_of(key, source, collection), source.get_origin(key))
                for key in source.property_names()
                if include(key)
            }
            descriptors.append(SourceDescriptor(source.name, properties))
        return tuple(descriptors)

    def _describe(self, key: str, source: FlatSource, collection: SourceCollection) -> ReportEntry:
        return ReportEntry(key, self._value_of(key, source, collection), source.name, source.get_origin(key))

    def _value_of(self, key: str, source: FlatSource, collection: SourceCollection) -> Any:
        resolved = self._resolver.resolve(source.get_property(key), collection.lookup, key=key)
        return self._sanitizer.sanitize(key, resolved)


def compile_filter(pattern: str | None) -> Callable[[str], bool]:
    """Return a predicate keeping keys where *pattern* is found (all keys when ``None``).

    Examples
    --------
    >>> keep = compile_filter(r"^server\\.")
    >>> keep("server.port"), keep("management.server.port")
    (True, False)
    >>> compile_filter(None)("anything")
    True
    """

    if pattern is None:
        return lambda key: True
    try:
        compiled = re.compile(pattern)
    except re.error as exc:
        raise InvalidPattern(f"Invalid property filter {pattern!r}: {exc}") from exc
    return lambda key: compiled.search(key) is not None
