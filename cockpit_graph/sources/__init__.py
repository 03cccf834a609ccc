"""Content sources for the transformation pipeline."""

from .base import BaseSource
from .mock import MockSource
from .json_export import JSONExportSource

__all__ = ["BaseSource", "MockSource", "JSONExportSource"]
