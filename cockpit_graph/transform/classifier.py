"""
Field classification for cockpit_graph.

Splits a collection's field schema into the groups the composer handles
differently. Every field lands in exactly one group.
"""

from dataclasses import dataclass, field
from typing import List, Mapping

from ..models import FieldDefinition

IMAGE_TYPE = "image"
ASSET_TYPE = "asset"
COLLECTION_LINK_TYPE = "collectionlink"
LAYOUT_TYPE = "layout"


@dataclass
class FieldGroups:
    """
    Field names of a schema, partitioned by how they are composed.
    """
    image: List[str] = field(default_factory=list)
    asset: List[str] = field(default_factory=list)
    relation_link: List[str] = field(default_factory=list)
    layout: List[str] = field(default_factory=list)
    other: List[str] = field(default_factory=list)

    def __len__(self) -> int:
        return (len(self.image) + len(self.asset) + len(self.relation_link)
                + len(self.layout) + len(self.other))


def _type_of(definition) -> str:
    if isinstance(definition, FieldDefinition):
        return definition.type
    if isinstance(definition, Mapping):
        return definition.get("type", "")
    return ""


def classify_fields(fields: Mapping) -> FieldGroups:
    """
    Partition the keys of a field schema by field type.

    Args:
        fields: Mapping from field name to its definition (model or plain dict)

    Returns:
        FieldGroups preserving schema order within each group
    """
    groups = FieldGroups()
    buckets = {
        IMAGE_TYPE: groups.image,
        ASSET_TYPE: groups.asset,
        COLLECTION_LINK_TYPE: groups.relation_link,
        LAYOUT_TYPE: groups.layout,
    }
    for name, definition in fields.items():
        buckets.get(_type_of(definition), groups.other).append(name)
    return groups
