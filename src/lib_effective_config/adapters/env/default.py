"""Environment variable adapter.

Purpose
-------
Expose the process environment as an enumerable, origin-aware property source.
The source reads the backing mapping on every call, so a report always reflects
the environment at query time.

Key behaviours
--------------
* Without a prefix every variable is exposed under its own name, and probes
  fall back to relaxed names (``server.port`` → ``SERVER_PORT``) so
  placeholders written in dotted form still resolve.
* With a prefix (``default_env_prefix``) only matching variables are exposed;
  the prefix is stripped, ``__`` becomes ``.`` and names are lower-cased
  (``DEMO_SERVICE__TIMEOUT`` → ``service.timeout``).
* Origins read ``System Environment Property "NAME"``.
* :meth:`EnvironmentSource.pinned` freezes the environment for one query; the
  reporting engine pins the source once per report so lookups stay O(1).
"""

from __future__ import annotations

import os
from typing import Mapping

from ...observability import log_debug, make_event

SYSTEM_ENVIRONMENT = "systemEnvironment"


def default_env_prefix(slug: str) -> str:
    """Return the canonical environment prefix for *slug*.

    Examples
    --------
    >>> default_env_prefix('lib-effective-config')
    'LIB_EFFECTIVE_CONFIG'
    """

    return slug.replace("-", "_").upper()


class EnvironmentSource:
    """Property source backed by ``os.environ`` (or an injected mapping).

    Examples
    --------
    >>> source = EnvironmentSource(environ={"SERVER_PORT": "8080", "HOME": "/root"})
    >>> source.property_names()
    ('SERVER_PORT', 'HOME')
    >>> source.get_property("server.port")
    '8080'
    >>> source.get_origin("HOME")
    'System Environment Property "HOME"'
    >>> scoped = EnvironmentSource(environ={"DEMO_SERVICE__TIMEOUT": "5", "HOME": "/root"}, prefix="DEMO")
    >>> scoped.property_names(), scoped.get_origin("service.timeout")
    (('service.timeout',), 'System Environment Property "DEMO_SERVICE__TIMEOUT"')
    """

    def __init__(
        self,
        *,
        environ: Mapping[str, str] | None = None,
        prefix: str | None = None,
        name: str = SYSTEM_ENVIRONMENT,
    ) -> None:
        """Initialise the source.

        Parameters
        ----------
        environ:
            Mapping to read from. Defaults to :data:`os.environ`.
        prefix:
            Optional namespace prefix (upper-case). ``_`` is appended if missing.
        name:
            Source name shown in reports.
        """

        self.name = name
        self._environ = os.environ if environ is None else environ
        if prefix and not prefix.endswith("_"):
            prefix = f"{prefix}_"
        self._prefix = prefix or ""
        self._names: dict[str, str] | None = None

    def pinned(self) -> "EnvironmentSource":
        """Return a copy frozen at the current environment for the length of one query.

        The copy computes its name map once, so lookups no longer rescan the
        environment per key.

        Examples
        --------
        >>> environ = {"DEMO_MODE": "dev"}
        >>> frozen = EnvironmentSource(environ=environ, prefix="DEMO").pinned()
        >>> environ["DEMO_MODE"] = "prod"
        >>> frozen.get_property("mode")
        'dev'
        """

        frozen = EnvironmentSource(environ=dict(self._environ), prefix=self._prefix or None, name=self.name)
        frozen._names = frozen._snapshot()
        return frozen

    def property_names(self) -> tuple[str, ...]:
        names = tuple(self._snapshot())
        log_debug("env_variables_listed", **make_event(self.name, None, {"keys": len(names)}))
        return names

    def contains_property(self, key: str) -> bool:
        return self._variable_for(key) is not None

    def get_property(self, key: str) -> str | None:
        variable = self._variable_for(key)
        return None if variable is None else self._environ[variable]

    def get_origin(self, key: str) -> str | None:
        variable = self._variable_for(key)
        return None if variable is None else f'System Environment Property "{variable}"'

    def _snapshot(self) -> dict[str, str]:
        """Return ``{property name: variable name}`` for the current environment."""

        if self._names is not None:
            return self._names
        if not self._prefix:
            return {variable: variable for variable in self._environ}
        collected: dict[str, str] = {}
        for variable in self._environ:
            if not variable.startswith(self._prefix):
                continue
            stripped = variable[len(self._prefix) :]
            if stripped:
                collected[stripped.replace("__", ".").lower()] = variable
        return collected

    def _variable_for(self, key: str) -> str | None:
        if self._prefix:
            return self._snapshot().get(key)
        for candidate in _relaxed_names(key):
            if candidate in self._environ:
                return candidate
        return None


def _relaxed_names(key: str) -> list[str]:
    """Return the variable names tried for *key*, exact name first.

    Examples
    --------
    >>> _relaxed_names("server.port")
    ['server.port', 'server_port', 'SERVER.PORT', 'SERVER_PORT']
    >>> _relaxed_names("PATH")
    ['PATH']
    """

    underscored = key.replace(".", "_").replace("-", "_")
    candidates = [key, underscored, key.upper(), underscored.upper()]
    return list(dict.fromkeys(candidates))
