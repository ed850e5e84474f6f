"""Domain-level report value objects.

Purpose
-------
Carry the outcome of a property report from the engine to whichever transport
the host application chooses. Everything here is immutable and free of I/O.

Contents
--------
* :class:`ReportEntry` – the winning value for one key plus its source name.
* :class:`Report` – entries sorted by key with dict/JSON renderers.
* :class:`PropertyValue` – a value and its origin inside one source.
* :class:`SourceDescriptor` – every value a single source contributes.
* :data:`EMPTY_REPORT` – canonical report for environments without sources.

System Role
-----------
Built by :class:`lib_effective_config.application.reporter.PrecedenceReporter`
and returned unchanged by :class:`lib_effective_config.core.PropertiesView`.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Iterator


@dataclass(frozen=True, slots=True)
class ReportEntry:
    """Effective value of one configuration key.

    Attributes
    ----------
    key:
        Property name.
    value:
        Resolved and sanitised value.
    source_name:
        Name of the highest-precedence source defining ``key``; ``None`` when no
        source defines it any longer.
    origin:
        Origin text supplied by origin-aware sources (``path:line`` etc.).
    """

    key: str
    value: Any
    source_name: str | None = None
    origin: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the ``{name, value, source, origin}`` shape, omitting ``None`` metadata.

        Examples
        --------
        >>> ReportEntry("server.port", "8080", "defaults").to_dict()
        {'name': 'server.port', 'value': '8080', 'source': 'defaults'}
        >>> ReportEntry("gone", None).to_dict()
        {'name': 'gone', 'value': None}
        """

        payload: dict[str, Any] = {"name": self.key, "value": self.value}
        if self.source_name is not None:
            payload["source"] = self.source_name
        if self.origin is not None:
            payload["origin"] = self.origin
        return payload


@dataclass(frozen=True, slots=True)
class Report:
    """Immutable, key-sorted collection of :class:`ReportEntry` objects.

    Entries are sorted on construction so every producer yields the same order.

    Examples
    --------
    >>> report = Report([ReportEntry("b", 2, "s"), ReportEntry("a", 1, "s")])
    >>> [entry.key for entry in report]
    ['a', 'b']
    >>> report.get("b").value
    2
    >>> report.to_json()
    '{"properties":[{"name":"a","value":1,"source":"s"},{"name":"b","value":2,"source":"s"}]}'
    """

    entries: tuple[ReportEntry, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", tuple(sorted(self.entries, key=lambda entry: entry.key)))

    def __iter__(self) -> Iterator[ReportEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def keys(self) -> list[str]:
        return [entry.key for entry in self.entries]

    def get(self, key: str) -> ReportEntry | None:
        """Return the entry for *key* or ``None``."""

        for entry in self.entries:
            if entry.key == key:
                return entry
        return None

    def as_mapping(self) -> dict[str, Any]:
        """Return ``{key: value}`` for quick assertions and templating."""

        return {entry.key: entry.value for entry in self.entries}

    def to_dict(self) -> dict[str, Any]:
        return {"properties": [entry.to_dict() for entry in self.entries]}

    def to_json(self, *, indent: int | None = None) -> str:
        """Serialise the report to JSON; values that JSON cannot encode are rendered with ``str``."""

        return _dumps(self.to_dict(), indent)


@dataclass(frozen=True, slots=True)
class PropertyValue:
    """A single value inside one source together with its origin."""

    value: Any
    origin: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"value": self.value}
        if self.origin is not None:
            payload["origin"] = self.origin
        return payload


@dataclass(frozen=True, slots=True)
class SourceDescriptor:
    """Every (resolved, sanitised) value contributed by one source, shadowed ones included.

    Examples
    --------
    >>> descriptor = SourceDescriptor("env", {"HOME": PropertyValue("/root")})
    >>> descriptor.to_dict()
    {'name': 'env', 'properties': {'HOME': {'value': '/root'}}}
    """

    name: str
    properties: Mapping[str, PropertyValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "properties": {key: value.to_dict() for key, value in self.properties.items()}}


def sources_to_json(descriptors: Iterable[SourceDescriptor], *, indent: int | None = None) -> str:
    """Serialise *descriptors* as ``{"propertySources": [...]}``."""

    return _dumps({"propertySources": [descriptor.to_dict() for descriptor in descriptors]}, indent)


def _dumps(payload: Mapping[str, Any], indent: int | None) -> str:
    return json.dumps(payload, indent=indent, separators=(",", ":"), ensure_ascii=False, default=str)


EMPTY_REPORT = Report()
"""Canonical empty report returned when no source contributes a key."""
