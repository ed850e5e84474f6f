"""Composition root for ``lib_effective_config``.

Purpose
-------
Wire sources, the sanitiser, and the precedence reporter into the two queries
operators need ("show me everything" and "show me this key"), and assemble the
default source list from the environment, a dotenv file, and structured files.

Contents
--------
* :class:`SourceLoadError` – raised when an adapter fails to produce a source.
* :class:`PropertiesView` – the query facade (``get_report``, ``get_entry``,
  ``get_sources``) with sanitiser configuration.
* :func:`collect_sources` – default precedence list used by the CLI.
* :func:`read_properties` – one-call convenience returning a :class:`Report`.

System Role
-----------
Nothing is cached: each query re-reads the caller's sources and rebuilds the
flattened collection, so the report reflects the sources at call time.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping, Sequence

from .adapters.dotenv.default import DotEnvLoader
from .adapters.env.default import EnvironmentSource, default_env_prefix
from .adapters.file_loaders.structured import load_file_source
from .application.collection import SourceCollection, build_collection
from .application.reporter import PrecedenceReporter
from .application.sanitizer import Sanitizer
from .domain.errors import ConfigError, InvalidFormat, NotFound
from .domain.report import Report, ReportEntry, SourceDescriptor
from .domain.sources import CompositeSource, MapSource
from .observability import bind_trace_id, log_debug, log_error, make_event

OVERRIDES = "overrides"
FILES = "files"

SourceSupplier = Callable[[], Iterable[Any]]


class SourceLoadError(ConfigError):
    """Raised when a configuration source cannot be materialised.

    Wraps :class:`InvalidFormat` or :class:`NotFound` from the adapters with the
    offending path so callers can catch a single exception family.
    """


class PropertiesView:
    """Read-only view of the effective configuration of a set of sources.

    Why
    ----
    Operators want the value a service actually uses for each key, masked when
    secret, without reading every source by hand.

    Parameters
    ----------
    sources:
        Property sources in precedence order (index ``0`` wins), or a
        zero-argument callable returning them. A callable is invoked on every
        query.
    keys_to_sanitize:
        Replacement for the default sanitiser patterns.

    Examples
    --------
    >>> view = PropertiesView([
    ...     MapSource("priority", {"my.prop1": "mypropval1"}),
    ...     MapSource("secondpriority", {"my.prop1": "mypropval2", "dbPassword": "123456"}),
    ... ])
    >>> [entry.to_dict() for entry in view.get_report()]
    [{'name': 'dbPassword', 'value': '******', 'source': 'secondpriority'}, {'name': 'my.prop1', 'value': 'mypropval1', 'source': 'priority'}]
    >>> view.get_entry("my.prop1").source_name
    'priority'
    """

    def __init__(
        self,
        sources: Iterable[Any] | SourceSupplier | None = None,
        *,
        keys_to_sanitize: Iterable[str] | None = None,
    ) -> None:
        self._sources = sources
        self._sanitizer = Sanitizer(keys_to_sanitize)
        self._reporter = PrecedenceReporter(self._sanitizer)

    @property
    def sanitizer(self) -> Sanitizer:
        return self._sanitizer

    def set_keys_to_sanitize(self, *keys: str) -> None:
        """Replace the sanitiser pattern set; pass the full desired set each time."""

        self._sanitizer.set_keys_to_sanitize(*keys)

    def add_keys_to_sanitize(self, *keys: str) -> None:
        self._sanitizer.add_keys_to_sanitize(*keys)

    def sanitize(self, key: str, value: Any) -> Any:
        return self._sanitizer.sanitize(key, value)

    def get_report(self, pattern: str | None = None) -> Report:
        """Return every enumerable key with its effective value, sorted by key."""

        return self._reporter.describe_all(self._collection(), pattern)

    def get_entry(self, key: str) -> ReportEntry | None:
        """Return the effective value of *key*, or ``None`` when no source defines it."""

        return self._reporter.describe_one(key, self._collection())

    def get_sources(self, pattern: str | None = None) -> tuple[SourceDescriptor, ...]:
        """Return every enumerable source with all of its values, including shadowed ones."""

        return self._reporter.describe_sources(self._collection(), pattern)

    def _collection(self) -> SourceCollection:
        sources = self._sources() if callable(self._sources) else self._sources
        collection = build_collection(sources)
        log_debug("sources_collected", **make_event(None, None, {"sources": collection.names()}))
        return collection


def collect_sources(
    *,
    overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
    include_env: bool = True,
    env_prefix: str | None = None,
    dotenv: str | None = None,
    start_dir: str | None = None,
    files: Sequence[str] = (),
) -> list[Any]:
    """Return the default source list, highest precedence first.

    Order: ``overrides`` → ``systemEnvironment`` → ``dotenv`` → ``files``
    (a composite whose children are the files in reverse order, so a later
    file wins over an earlier one).

    Parameters
    ----------
    overrides:
        In-memory key/value pairs (e.g. ``--set`` arguments).
    environ / include_env / env_prefix:
        Environment mapping (defaults to ``os.environ``), whether to include it,
        and an optional namespace prefix.
    dotenv:
        Explicit dotenv file. When absent and *start_dir* is given, ``.env`` is
        searched upwards from *start_dir*.
    files:
        Structured configuration files (TOML, JSON, YAML).

    Raises
    ------
    SourceLoadError
        When a dotenv or structured file is missing or malformed.

    Examples
    --------
    >>> sources = collect_sources(overrides={"a": 1}, environ={"B": "2"})
    >>> [source.name for source in sources]
    ['overrides', 'systemEnvironment']
    """

    bind_trace_id(None)
    sources: list[Any] = []
    if overrides:
        sources.append(MapSource(OVERRIDES, overrides))
    if include_env:
        sources.append(EnvironmentSource(environ=environ, prefix=env_prefix))
    if dotenv is not None or start_dir is not None:
        dotenv_source = _load(dotenv or start_dir or "", lambda: DotEnvLoader().load(dotenv, start_dir=start_dir))
        if dotenv_source is not None:
            sources.append(dotenv_source)
    if files:
        children = [_load(path, lambda path=path: load_file_source(path)) for path in reversed(files)]
        sources.append(CompositeSource(FILES, children))
    return sources


def read_properties(
    *,
    keys_to_sanitize: Iterable[str] | None = None,
    pattern: str | None = None,
    **options: Any,
) -> Report:
    """Collect the default sources (see :func:`collect_sources`) and return their report."""

    view = PropertiesView(collect_sources(**options), keys_to_sanitize=keys_to_sanitize)
    return view.get_report(pattern)


def _load(path: str, loader: Callable[[], Any]) -> Any:
    """Run *loader*, wrapping adapter failures in :class:`SourceLoadError`."""

    try:
        return loader()
    except (InvalidFormat, NotFound) as exc:
        log_error("source_load_failed", **make_event(path, None, {"error": str(exc)}))
        raise SourceLoadError(f"Failed to load configuration source {path}: {exc}") from exc


__all__ = [
    "PropertiesView",
    "SourceLoadError",
    "collect_sources",
    "default_env_prefix",
    "read_properties",
]
