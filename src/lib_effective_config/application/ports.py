"""Application-layer ports describing what a property source must offer.

Purpose
-------
Define the structural contracts the reporting engine relies on so any object
with the right shape (an adapter, a test double, a host application's own
registry entry) can take part in a report without inheriting from a library
class.

Contents
--------
* :class:`PropertySource` – named source that can be probed by exact key.
* :class:`MembershipCheck` – optional `contains_property` probe; without it a
  key is present when `get_property` returns something other than `None`.
* :class:`EnumerableSource` – a source that can also list its keys.
* :class:`OriginLookup` – optional capability returning per-key origin text.
* :class:`CompositeLike` – a named grouping of nested sources.
* :class:`Pinnable` – live sources that can hand out a per-query frozen copy.

System Role
-----------
Capabilities are checked with ``isinstance`` against these runtime-checkable
protocols. Composite expansion in :mod:`lib_effective_config.application.collection`
turns every :class:`CompositeLike` into leaf sources before reporting.
"""

from __future__ import annotations

from typing import Iterable, Protocol, Sequence, runtime_checkable


@runtime_checkable
class PropertySource(Protocol):
    """A named set of configuration values that can be probed by key.

    ``get_property`` returns ``None`` when the key is absent.
    """

    name: str

    def get_property(self, key: str) -> object | None:
        """Return the raw value stored under *key* or ``None``."""


@runtime_checkable
class EnumerableSource(PropertySource, Protocol):
    """A property source whose full key set can be listed.

    A source may also define ``is_enumerable()``; returning ``False`` there
    demotes it to probe-only.
    """

    def property_names(self) -> Sequence[str]:
        """Return every key in source order."""


@runtime_checkable
class MembershipCheck(Protocol):
    """Optional capability answering "is *key* defined here" without reading it."""

    def contains_property(self, key: str) -> bool:
        """Return ``True`` when *key* is defined by this source."""


@runtime_checkable
class OriginLookup(Protocol):
    """Optional capability describing where a value physically came from."""

    def get_origin(self, key: str) -> str | None:
        """Return origin text (``path:line``, file name, ...) for *key*."""


@runtime_checkable
class CompositeLike(Protocol):
    """A named grouping of nested sources, flattened before reporting."""

    name: str

    @property
    def sources(self) -> Iterable[object]:
        """Yield the nested sources in precedence order."""


@runtime_checkable
class Pinnable(Protocol):
    """Optional capability for live sources: freeze the current state for one query."""

    def pinned(self) -> object:
        """Return a copy that keeps answering from the state at call time."""
