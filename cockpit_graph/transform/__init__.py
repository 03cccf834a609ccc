"""Transformation pipeline from CMS records to graph nodes."""

from .classifier import FieldGroups, classify_fields
from .assets import AssetLookup, InlineAssetResolver, InlineAssets
from .layout import LayoutWalker, LayoutResult, parse_layout
from .localization import LocalizationComposer
from .assembler import NodeAssembler, content_digest
from .orchestrator import Orchestrator, BuildResult

__all__ = [
    "FieldGroups",
    "classify_fields",
    "AssetLookup",
    "InlineAssetResolver",
    "InlineAssets",
    "LayoutWalker",
    "LayoutResult",
    "parse_layout",
    "LocalizationComposer",
    "NodeAssembler",
    "content_digest",
    "Orchestrator",
    "BuildResult"
]
