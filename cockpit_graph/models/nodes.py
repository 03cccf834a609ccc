"""
Graph-side models for cockpit_graph.

This module defines the records produced by the pipeline and by its asset
collaborators.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class RemoteAsset(BaseModel):
    """
    A remote file that has been downloaded and cached locally.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    content_digest: str = Field(
        ...,
        alias="contentDigest",
        description="Hex digest of the downloaded bytes"
    )

    ext: str = Field(
        default="",
        description="File extension including the leading dot (e.g. '.png')"
    )

    name: str = Field(
        ...,
        description="Display name of the file, without extension"
    )

    @property
    def static_filename(self) -> str:
        """Filename the asset is published under: name-digest.ext"""
        return f"{self.name}-{self.content_digest}{self.ext}"


class NodeInternal(BaseModel):
    """
    The 'internal' block of a graph node.
    """

    model_config = ConfigDict(populate_by_name=True)

    type: str = Field(
        ...,
        description="Node type name"
    )

    content_digest: str = Field(
        ...,
        alias="contentDigest",
        description="Deterministic digest of the source record"
    )


class NodeFailure(BaseModel):
    """
    A record that could not be turned into a node.
    """

    collection: str = Field(
        ...,
        description="Collection (or 'singleton') the record belongs to"
    )

    entry_id: Optional[str] = Field(
        None,
        description="The record's _id, or the singleton name"
    )

    locale: Optional[str] = Field(
        None,
        description="Locale being composed when the failure happened"
    )

    error_type: str = Field(
        ...,
        description="Exception class name"
    )

    message: str = Field(
        ...,
        description="Human-readable failure description"
    )
