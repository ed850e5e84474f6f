"""Public package surface for ``lib_effective_config``.

Exports the query facade, the default source assembly, the source variants and
report value objects, plus the logging hooks, so callers never need to import
from the layered sub-packages directly.
"""

from __future__ import annotations

from .application.collection import SourceCollection, build_collection
from .application.placeholders import PlaceholderResolver
from .application.reporter import PrecedenceReporter
from .application.sanitizer import DEFAULT_KEYS_TO_SANITIZE, MASK, Sanitizer
from .core import PropertiesView, SourceLoadError, collect_sources, default_env_prefix, read_properties
from .domain.errors import ConfigError, InvalidFormat, InvalidPattern, NotFound
from .domain.report import EMPTY_REPORT, PropertyValue, Report, ReportEntry, SourceDescriptor
from .domain.sources import CompositeSource, LookupSource, MapSource
from .observability import bind_trace_id, get_logger

__all__ = [
    "CompositeSource",
    "ConfigError",
    "DEFAULT_KEYS_TO_SANITIZE",
    "EMPTY_REPORT",
    "InvalidFormat",
    "InvalidPattern",
    "LookupSource",
    "MASK",
    "MapSource",
    "NotFound",
    "PlaceholderResolver",
    "PrecedenceReporter",
    "PropertiesView",
    "PropertyValue",
    "Report",
    "ReportEntry",
    "Sanitizer",
    "SourceCollection",
    "SourceDescriptor",
    "SourceLoadError",
    "bind_trace_id",
    "build_collection",
    "collect_sources",
    "default_env_prefix",
    "get_logger",
    "read_properties",
]
