"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by adapters, the reporting engine, and
consuming applications. The hierarchy lives in the domain layer so outer layers
may depend on it without the domain depending on them.

Contents
--------
* :class:`ConfigError` – umbrella base class for all library failures.
* :class:`InvalidFormat` – parsing problems while reading files or dotenv
  sources.
* :class:`NotFound` – raised when an expected configuration resource is missing.
* :class:`InvalidPattern` – a sanitiser key pattern or report filter that is
  not a valid regular expression.

System Role
-----------
The resolution engine itself never raises for malformed values; these types
surface only from adapters and configuration calls. Callers catch
:class:`ConfigError` to handle all library failures uniformly.
"""

from __future__ import annotations


class ConfigError(Exception):
    """Base type for all exceptions emitted by ``lib_effective_config``."""


class InvalidFormat(ConfigError):
    """Raised when an input artifact cannot be parsed into key/value pairs.

    Typical Sources
    ---------------
    Structured file loaders (:mod:`tomllib`, :mod:`json`, :mod:`yaml`) and the
    dotenv parser.
    """


class NotFound(ConfigError):
    """Represents a missing resource (file, directory, etc.)."""


class InvalidPattern(ConfigError):
    """Raised when a key pattern cannot be compiled into a regular expression.

    Why
    ----
    Pattern errors must surface when the sanitiser or a report filter is
    configured, never halfway through building a report.
    """
