"""
Error types for cockpit_graph.

Every error raised while turning a single entry into graph nodes derives from
CockpitGraphError so the orchestrator can isolate it per entry and locale.
"""

from typing import List, Optional


class CockpitGraphError(Exception):
    """Base class for all transformation errors."""


class MalformedLayoutError(CockpitGraphError):
    """
    A string-encoded layout field could not be parsed as a list of blocks.
    """

    def __init__(self, field_name: str, reason: str):
        self.field_name = field_name
        self.reason = reason
        super().__init__(f"Malformed layout in field '{field_name}': {reason}")


class MissingRelationTargetError(CockpitGraphError):
    """
    A collection link field has no target, or its target carries no _id.
    """

    def __init__(self, field_name: str, entry_id: Optional[str] = None):
        self.field_name = field_name
        self.entry_id = entry_id
        super().__init__(
            f"Missing relation target for field '{field_name}' on entry {entry_id}"
        )


class AmbiguousAssetPathError(CockpitGraphError):
    """
    More than one asset lookup key matches a path (strict lookups only).
    """

    def __init__(self, path: str, candidates: List[str]):
        self.path = path
        self.candidates = candidates
        super().__init__(f"Asset path '{path}' matches {len(candidates)} assets: {candidates}")


class AssetFetchError(CockpitGraphError):
    """Downloading a remote asset failed."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch asset {url}: {reason}")
