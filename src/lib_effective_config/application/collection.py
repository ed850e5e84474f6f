"""Flatten prioritised property sources into a single lookup chain.

Purpose
-------
Turn the caller's ordered, possibly nested list of sources into an immutable
sequence of leaf sources. Position in the sequence is precedence: index ``0``
wins over every later index.

Contents
    - ``FlatSource``: leaf source exposed under its flattened name.
    - ``SourceCollection``: immutable ordered sequence with lookup helpers.
    - ``build_collection``: depth-first composite expansion.

System Role
-----------
Every query in :mod:`lib_effective_config.core` calls :func:`build_collection`
afresh, so changes in live backing sources show up on the next report. Live
sources that can pin themselves (:class:`~.ports.Pinnable`) are frozen once per
query, which keeps one report consistent and reads the backing state once.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Sequence

from ..observability import log_debug, make_event
from .ports import CompositeLike, EnumerableSource, MembershipCheck, OriginLookup, Pinnable

SEPARATOR = ":"


@dataclass(frozen=True, slots=True)
class FlatSource:
    """Leaf source exposed under a flattened ``parent:child`` name."""

    name: str
    source: Any

    @property
    def enumerable(self) -> bool:
        if not isinstance(self.source, EnumerableSource):
            return False
        is_enumerable = getattr(self.source, "is_enumerable", None)
        return bool(is_enumerable()) if callable(is_enumerable) else True

    def property_names(self) -> Sequence[str]:
        if not self.enumerable:
            return ()
        return tuple(self.source.property_names())

    def contains_property(self, key: str) -> bool:
        if isinstance(self.source, MembershipCheck):
            return bool(self.source.contains_property(key))
        return self.source.get_property(key) is not None

    def get_property(self, key: str) -> Any:
        return self.source.get_property(key)

    def get_origin(self, key: str) -> str | None:
        if not isinstance(self.source, OriginLookup):
            return None
        origin = self.source.get_origin(key)
        return str(origin) if origin is not None else None


@dataclass(frozen=True, slots=True)
class SourceCollection:
    """Ordered, immutable sequence of :class:`FlatSource` objects.

    Examples
    --------
    >>> from lib_effective_config.domain.sources import MapSource
    >>> collection = build_collection([MapSource("a", {"x": 1}), MapSource("b", {"x": 2, "y": 3})])
    >>> collection.lookup("x"), collection.lookup("y"), collection.lookup("z")
    (1, 3, None)
    """

    sources: tuple[FlatSource, ...] = ()

    def __iter__(self) -> Iterator[FlatSource]:
        return iter(self.sources)

    def __len__(self) -> int:
        return len(self.sources)

    def names(self) -> list[str]:
        return [source.name for source in self.sources]

    def enumerable(self) -> Iterator[FlatSource]:
        """Yield the sources that take part in reporting, in precedence order."""

        for source in self.sources:
            if source.enumerable:
                yield source
            else:
                log_debug("source_not_enumerable", **make_event(source.name, None))

    def lookup(self, key: str) -> Any:
        """Return the first non-``None`` raw value of *key*, enumerable sources or not.

        A source answering ``None`` does not hide a value further down the chain.
        """

        for source in self.sources:
            value = source.get_property(key)
            if value is not None:
                return value
        return None


def build_collection(raw_sources: Iterable[Any] | None) -> SourceCollection:
    """Flatten *raw_sources* depth-first into a :class:`SourceCollection`.

    Composite children take their parent's position, keep their own relative
    order and are named ``<parent>:<child>``; nested composites accumulate the
    prefix.

    Examples
    --------
    >>> from lib_effective_config.domain.sources import CompositeSource, MapSource
    >>> collection = build_collection([
    ...     MapSource("first", {}),
    ...     CompositeSource("group", [MapSource("a", {}), CompositeSource("inner", [MapSource("b", {})])]),
    ...     MapSource("last", {}),
    ... ])
    >>> collection.names()
    ['first', 'group:a', 'group:inner:b', 'last']
    >>> len(build_collection(None))
    0
    """

    flattened: list[FlatSource] = []
    for source in raw_sources or ():
        _extract("", source, flattened)
    return SourceCollection(tuple(flattened))


def _extract(prefix: str, source: Any, target: list[FlatSource]) -> None:
    """Append *source* (or its leaves, for composites) to *target*."""

    if isinstance(source, CompositeLike):
        nested_prefix = f"{prefix}{source.name}{SEPARATOR}"
        for child in source.sources:
            _extract(nested_prefix, child, target)
        return
    if isinstance(source, Pinnable):
        source = source.pinned()
    target.append(FlatSource(f"{prefix}{source.name}", source))
