"""Data models for cockpit_graph."""

from .schema import FieldDefinition, FieldSchema, CollectionDefinition, SingletonDefinition
from .nodes import RemoteAsset, NodeInternal, NodeFailure

__all__ = [
    "FieldDefinition",
    "FieldSchema",
    "CollectionDefinition",
    "SingletonDefinition",
    "RemoteAsset",
    "NodeInternal",
    "NodeFailure"
]
