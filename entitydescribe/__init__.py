"""
Self-description documents for a registry of entity providers.

Renders XML and HTML "describe" pages listing each registered prefix,
its capabilities, canonical URLs, custom actions, formats and sample
entity shape.
"""

__version__ = "0.3.0"

from .capabilities import Capability, CustomAction, EntityReference, ViewKind
from .errors import DescribeError, UnknownPrefixError
from .render import DocumentRenderer
from .templates import DocumentFormat

__all__ = [
    "Capability",
    "CustomAction",
    "DescribeError",
    "DocumentFormat",
    "DocumentRenderer",
    "EntityReference",
    "UnknownPrefixError",
    "ViewKind",
    "__version__",
]
