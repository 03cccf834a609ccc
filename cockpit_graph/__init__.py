"""
cockpit_graph: CMS content to site graph nodes.

Converts Cockpit CMS collections and singletons into normalized, content-addressed
graph nodes for a static-site build.
"""

__version__ = "0.1.0"
__author__ = "cockpit_graph Project"

# Import main components
from .database import NodeStore
from .models import CollectionDefinition, SingletonDefinition, RemoteAsset, NodeFailure
from .sources import BaseSource, MockSource, JSONExportSource
from .fetch import RemoteAssetCache
from .transform import AssetLookup, NodeAssembler, Orchestrator, BuildResult

__all__ = [
    "NodeStore",
    "CollectionDefinition",
    "SingletonDefinition",
    "RemoteAsset",
    "NodeFailure",
    "BaseSource",
    "MockSource",
    "JSONExportSource",
    "RemoteAssetCache",
    "AssetLookup",
    "NodeAssembler",
    "Orchestrator",
    "BuildResult"
]
