"""Domain-level property source variants.

Purpose
-------
Provide the small set of concrete sources the engine and the adapters share:
an immutable mapping, a named grouping of nested sources, and a probe-only
source backed by a callable. Each variant satisfies the capability protocols in
:mod:`lib_effective_config.application.ports` structurally.

Contents
--------
* :class:`MapSource` – enumerable, origin-aware mapping of key to raw value.
* :class:`CompositeSource` – named grouping of nested sources.
* :class:`LookupSource` – non-enumerable source answering exact-key probes.

System Role
-----------
No I/O happens here. Adapters produce :class:`MapSource` instances; host
applications can wrap their own registries in any of these variants.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Sequence


@dataclass(frozen=True, slots=True)
class MapSource:
    """Immutable, enumerable key/value source with optional per-key origins.

    Examples
    --------
    >>> source = MapSource("defaults", {"server.port": 8080}, {"server.port": "app.toml"})
    >>> source.get_property("server.port"), source.get_origin("server.port")
    (8080, 'app.toml')
    >>> source.property_names()
    ('server.port',)
    >>> source.contains_property("missing")
    False
    """

    name: str
    properties: Mapping[str, Any] = field(default_factory=dict)
    origins: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))
        object.__setattr__(self, "origins", MappingProxyType(dict(self.origins or {})))

    def property_names(self) -> tuple[str, ...]:
        return tuple(self.properties)

    def contains_property(self, key: str) -> bool:
        return key in self.properties

    def get_property(self, key: str) -> Any:
        return self.properties.get(key)

    def get_origin(self, key: str) -> str | None:
        return self.origins.get(key)


@dataclass(frozen=True, slots=True)
class CompositeSource:
    """Named grouping of nested sources (which may be composites themselves).

    Probing a composite walks its children in order, so it can still be used
    as a plain source by callers that never flatten it.

    Examples
    --------
    >>> group = CompositeSource("group", [MapSource("a", {"x": 1}), MapSource("b", {"x": 2, "y": 3})])
    >>> group.get_property("x"), group.get_property("y")
    (1, 3)
    >>> group.property_names()
    ('x', 'y')
    """

    name: str
    sources: Sequence[Any] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "sources", tuple(self.sources))

    def property_names(self) -> tuple[str, ...]:
        names: dict[str, None] = {}
        for source in self.sources:
            if hasattr(source, "property_names"):
                names.update(dict.fromkeys(source.property_names()))
        return tuple(names)

    def contains_property(self, key: str) -> bool:
        return any(_contains(source, key) for source in self.sources)

    def get_property(self, key: str) -> Any:
        for source in self.sources:
            value = source.get_property(key)
            if value is not None:
                return value
        return None


@dataclass(frozen=True, slots=True)
class LookupSource:
    """Probe-only source backed by a callable returning ``None`` for absent keys.

    The key set cannot be listed, so reports skip this source; placeholder
    resolution can still read from it.

    Examples
    --------
    >>> source = LookupSource("random", lambda key: "42" if key == "random.int" else None)
    >>> source.get_property("random.int"), source.contains_property("other")
    ('42', False)
    """

    name: str
    lookup: Callable[[str], Any]

    def contains_property(self, key: str) -> bool:
        return self.lookup(key) is not None

    def get_property(self, key: str) -> Any:
        return self.lookup(key)



def _contains(source: Any, key: str) -> bool:
    """Membership test for children that may only offer ``get_property``."""

    contains = getattr(source, "contains_property", None)
    if callable(contains):
        return bool(contains(key))
    return source.get_property(key) is not None
