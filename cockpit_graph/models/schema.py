"""
Content definition models for cockpit_graph.

This module defines the structures that all sources must convert their CMS data
into before the transformation pipeline runs.
"""

from typing import Any, Dict, List
from pydantic import BaseModel, Field, field_validator, model_validator


class FieldDefinition(BaseModel):
    """
    Schema of a single CMS field.
    """

    type: str = Field(
        default="",
        description="Field type tag (image, asset, collectionlink, layout, or anything else)"
    )

    localize: bool = Field(
        default=False,
        description="Whether the entry stores per-locale values under '<field>_<locale>'"
    )

    @model_validator(mode="before")
    @classmethod
    def _fill_nulls(cls, data: Any) -> Any:
        # Exported schemas carry null for unset options.
        if data is None:
            return {}
        if isinstance(data, dict):
            data = dict(data)
            if not isinstance(data.get("type"), str):
                data["type"] = ""
            if data.get("localize") is None:
                data["localize"] = False
        return data


FieldSchema = Dict[str, FieldDefinition]


class CollectionDefinition(BaseModel):
    """
    A CMS collection: its field schema and all of its entries.
    """

    name: str = Field(
        ...,
        description="Collection name; its singular form becomes the node type"
    )

    fields: FieldSchema = Field(
        default_factory=dict,
        description="Mapping from field name to field definition"
    )

    entries: List[Dict[str, Any]] = Field(
        default_factory=list,
        description="Raw entries keyed by (possibly locale-suffixed) field name"
    )

    @field_validator("fields", mode="before")
    @classmethod
    def _fields_from_list(cls, value: Any) -> Any:
        # The CMS API describes fields as a list of objects carrying their own name.
        if isinstance(value, list):
            return {
                item["name"]: {
                    "type": item.get("type", ""),
                    "localize": bool(item.get("localize", False)),
                }
                for item in value
                if isinstance(item, dict) and item.get("name")
            }
        return value


class SingletonDefinition(BaseModel):
    """
    A single unstructured CMS record.
    """

    name: str = Field(
        ...,
        description="Singleton name, used to build the node id"
    )

    data: Dict[str, Any] = Field(
        default_factory=dict,
        description="Raw singleton values"
    )
