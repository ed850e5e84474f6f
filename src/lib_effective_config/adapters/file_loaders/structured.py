"""Structured configuration file adapters.

Purpose
-------
Convert on-disk TOML, JSON and YAML documents into flat, enumerable property
sources. Nested tables become dotted keys (``service.timeout``) and list items
are indexed (``hosts[0]``), which is the key shape placeholders and reports use.

Contents
--------
* :class:`BaseFileLoader` – shared helpers for reading files and validating
  mapping outputs.
* :class:`TOMLFileLoader` / :class:`JSONFileLoader` / :class:`YAMLFileLoader`
  – format-specific parsers.
* :func:`load_file_source` – picks a loader by suffix and returns a
  :class:`~lib_effective_config.domain.sources.MapSource` named after the file.
* :func:`flatten` – nested mapping to dotted keys.

System Role
-----------
Invoked by :func:`lib_effective_config.core.collect_sources` for every
``--file`` argument.
"""

from __future__ import annotations

import json
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Iterator

import yaml

from ...domain.errors import InvalidFormat, NotFound
from ...domain.sources import MapSource
from ...observability import log_debug, log_error, make_event


class BaseFileLoader:
    """Common utilities shared by the structured file loaders."""

    format = "file"

    def _read(self, path: str) -> bytes:
        """Read *path* as bytes, raising :class:`NotFound` when the file is missing."""

        file_path = Path(path)
        if not file_path.is_file():
            raise NotFound(f"Configuration file not found: {path}")
        payload = file_path.read_bytes()
        log_debug("config_file_read", **make_event(path, None, {"size": len(payload)}))
        return payload

    def _fail(self, path: str, exc: Exception) -> InvalidFormat:
        log_error("config_file_invalid", **make_event(path, None, {"format": self.format, "error": str(exc)}))
        return InvalidFormat(f"Invalid {self.format.upper()} in {path}: {exc}")

    @staticmethod
    def _ensure_mapping(data: object, *, path: str) -> Mapping[str, object]:
        """Ensure *data* behaves like a mapping, otherwise raise ``InvalidFormat``.

        Examples
        --------
        >>> BaseFileLoader._ensure_mapping({"key": 1}, path="demo")
        {'key': 1}
        >>> BaseFileLoader._ensure_mapping(42, path="demo")
        Traceback (most recent call last):
        ...
        lib_effective_config.domain.errors.InvalidFormat: File demo did not produce a mapping
        """

        if not isinstance(data, Mapping):
            raise InvalidFormat(f"File {path} did not produce a mapping")
        return data


class TOMLFileLoader(BaseFileLoader):
    """Load TOML documents using the standard library parser."""

    format = "toml"

    def load(self, path: str) -> Mapping[str, object]:
        try:
            data = tomllib.loads(self._read(path).decode("utf-8"))
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
            raise self._fail(path, exc) from exc
        return self._ensure_mapping(data, path=path)


class JSONFileLoader(BaseFileLoader):
    """Load JSON documents."""

    format = "json"

    def load(self, path: str) -> Mapping[str, object]:
        try:
            data = json.loads(self._read(path))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise self._fail(path, exc) from exc
        return self._ensure_mapping(data, path=path)


class YAMLFileLoader(BaseFileLoader):
    """Load YAML documents with ``yaml.safe_load``; an empty document is an empty mapping."""

    format = "yaml"

    def load(self, path: str) -> Mapping[str, object]:
        try:
            data = yaml.safe_load(self._read(path))
        except yaml.YAMLError as exc:
            raise self._fail(path, exc) from exc
        return self._ensure_mapping({} if data is None else data, path=path)


FILE_LOADERS: dict[str, BaseFileLoader] = {
    ".toml": TOMLFileLoader(),
    ".json": JSONFileLoader(),
    ".yaml": YAMLFileLoader(),
    ".yml": YAMLFileLoader(),
}


def load_file_source(path: str, *, name: str | None = None) -> MapSource:
    """Parse *path* and return it as a flat source named after the file.

    Every key's origin is the file path.

    Raises
    ------
    InvalidFormat
        For unsupported suffixes or unparsable content.
    NotFound
        When the file does not exist.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> target = Path(tmp.name) / 'app.json'
    >>> _ = target.write_text('{"server": {"port": 8080}}', encoding='utf-8')
    >>> source = load_file_source(str(target))
    >>> source.name == str(target), source.get_property("server.port")
    (True, 8080)
    >>> tmp.cleanup()
    """

    loader = FILE_LOADERS.get(Path(path).suffix.lower())
    if loader is None:
        raise InvalidFormat(f"Unsupported configuration file type: {path}")
    properties = dict(flatten(loader.load(path)))
    log_debug("config_file_loaded", **make_event(path, None, {"format": loader.format, "keys": len(properties)}))
    return MapSource(name or path, properties, dict.fromkeys(properties, path))


def flatten(data: Mapping[str, Any], parent: str = "") -> Iterator[tuple[str, Any]]:
    """Flatten nested mappings and lists into dotted/indexed keys.

    Empty tables and empty lists are kept as values so they stay visible.

    Examples
    --------
    >>> dict(flatten({"db": {"hosts": ["a", "b"], "port": 5432}, "empty": {}}))
    {'db.hosts[0]': 'a', 'db.hosts[1]': 'b', 'db.port': 5432, 'empty': {}}
    """

    for key, value in data.items():
        full_key = f"{parent}.{key}" if parent else str(key)
        yield from _flatten_value(full_key, value)


def _flatten_value(key: str, value: Any) -> Iterator[tuple[str, Any]]:
    if isinstance(value, Mapping) and value:
        yield from flatten(value, key)
    elif isinstance(value, list) and value:
        for index, item in enumerate(value):
            yield from _flatten_value(f"{key}[{index}]", item)
    else:
        yield key, value
