"""`.env` adapter.

Purpose
-------
Turn a `.env` file into an enumerable property source whose origins point at
the exact ``path:line`` each value came from.

Contents
--------
* :class:`DotEnvLoader` – locates and parses the file, returning a
  :class:`~lib_effective_config.domain.sources.MapSource`.
* Helper functions (`_iter_candidates`, `_parse_dotenv`, `_strip_quotes`) that
  perform discovery and parsing.

System Role
-----------
Feeds `.env` key/value pairs into the default source list assembled by
:func:`lib_effective_config.core.collect_sources`. Keys are kept exactly as
written; a later duplicate of a key replaces the earlier one.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from ...domain.errors import InvalidFormat, NotFound
from ...domain.sources import MapSource
from ...observability import log_debug, log_error, make_event

DOTENV = "dotenv"


class DotEnvLoader:
    """Load a dotenv file into a :class:`MapSource`.

    Why
    ----
    `.env` files supply secrets and developer overrides; operators need to see
    which line set a value.
    """

    def __init__(self, *, name: str = DOTENV) -> None:
        self.name = name
        self.last_loaded_path: str | None = None

    def load(self, path: str | None = None, *, start_dir: str | None = None) -> MapSource | None:
        """Return the parsed file as a source, or ``None`` when no file was found.

        Parameters
        ----------
        path:
            Explicit file to read. A missing explicit file raises
            :class:`NotFound`.
        start_dir:
            Directory that seeds the upward search for ``.env`` when *path* is
            not given (defaults to the working directory).

        Side Effects
        ------------
        Sets :attr:`last_loaded_path` and emits structured logging events.

        Examples
        --------
        >>> from tempfile import TemporaryDirectory
        >>> tmp = TemporaryDirectory()
        >>> target = Path(tmp.name) / '.env'
        >>> _ = target.write_text('SERVICE_TOKEN=secret', encoding='utf-8')
        >>> source = DotEnvLoader().load(start_dir=tmp.name)
        >>> source.get_property("SERVICE_TOKEN"), source.get_origin("SERVICE_TOKEN") == f"{target}:1"
        ('secret', True)
        >>> tmp.cleanup()
        """

        self.last_loaded_path = None
        if path is not None:
            candidate = Path(path)
            if not candidate.is_file():
                raise NotFound(f"Dotenv file not found: {path}")
            return self._load_file(candidate)
        for candidate in _iter_candidates(start_dir):
            if candidate.is_file():
                return self._load_file(candidate)
        log_debug("dotenv_not_found", **make_event(self.name, None, {"start_dir": start_dir}))
        return None

    def _load_file(self, path: Path) -> MapSource:
        self.last_loaded_path = str(path)
        properties, origins = _parse_dotenv(path)
        log_debug("dotenv_loaded", **make_event(self.name, None, {"path": self.last_loaded_path, "keys": len(properties)}))
        return MapSource(self.name, properties, origins)


def _iter_candidates(start_dir: str | None) -> Iterable[Path]:
    """Yield candidate dotenv paths walking from ``start_dir`` to filesystem root.

    Examples
    --------
    >>> next(_iter_candidates('.')).name
    '.env'
    """

    base = Path(start_dir) if start_dir else Path.cwd()
    for directory in [base, *base.parents]:
        yield directory / ".env"


def _parse_dotenv(path: Path) -> tuple[dict[str, str], dict[str, str]]:
    """Parse ``path`` into ``(properties, origins)``, raising ``InvalidFormat`` on malformed lines."""

    properties: dict[str, str] = {}
    origins: dict[str, str] = {}
    with path.open("r", encoding="utf-8") as handle:
        for line_number, raw_line in enumerate(handle, start=1):
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                log_error("dotenv_invalid_line", **make_event(DOTENV, None, {"path": str(path), "line": line_number}))
                raise InvalidFormat(f"Malformed line {line_number} in {path}")
            key, value = line.split("=", 1)
            key = key.strip()
            if not key:
                raise InvalidFormat(f"Missing key on line {line_number} in {path}")
            properties[key] = _strip_quotes(value.strip())
            origins[key] = f"{path}:{line_number}"
    return properties, origins


def _strip_quotes(value: str) -> str:
    """Trim surrounding quotes and inline comments from ``value``.

    Examples
    --------
    >>> _strip_quotes('"token"')
    'token'
    >>> _strip_quotes("value # comment")
    'value'
    """

    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
        return value[1:-1]
    if value.startswith("#"):
        return ""
    if " #" in value:
        return value.split(" #", 1)[0].strip()
    return value
