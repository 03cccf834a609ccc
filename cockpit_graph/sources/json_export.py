"""
JSON export source for cockpit_graph.

Reads collections, singletons and the asset table from a single JSON export:

    {
      "collections": [{"name": ..., "fields": ..., "entries": [...]}],
      "singletons": [{"name": ..., "data": {...}}],
      "assets": {"<path>": "<asset node id>"}
    }
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from pydantic import ValidationError

from ..models import CollectionDefinition, SingletonDefinition
from .base import BaseSource


class JSONExportSource(BaseSource):
    """
    Source backed by a JSON export file.
    """

    def __init__(self, export_path: str):
        """
        Initialize the source.

        Args:
            export_path: Path to the JSON export
        """
        self.export_path = Path(export_path)
        self._data: Dict[str, Any] = {}
        self._load()

    def _load(self) -> None:
        if not self.export_path.is_file():
            raise FileNotFoundError(f"Export file not found: {self.export_path}")
        with open(self.export_path, 'r', encoding='utf-8') as f:
            self._data = json.load(f) or {}
        logging.info(f"Loaded export from {self.export_path}")

    def get_collections(self) -> List[CollectionDefinition]:
        """
        Parse every collection in the export.

        Collections that do not match the expected shape are logged and skipped.
        """
        collections = []
        for raw in self._data.get("collections", []):
            try:
                collections.append(CollectionDefinition.model_validate(raw))
            except ValidationError as e:
                logging.warning(f"Skipping malformed collection {raw.get('name') if isinstance(raw, dict) else raw!r}: {e}")
        return collections

    def get_singletons(self) -> List[SingletonDefinition]:
        """
        Parse every singleton in the export.
        """
        singletons = []
        for raw in self._data.get("singletons", []):
            try:
                singletons.append(SingletonDefinition.model_validate(raw))
            except ValidationError as e:
                logging.warning(f"Skipping malformed singleton {raw.get('name') if isinstance(raw, dict) else raw!r}: {e}")
        return singletons

    def get_asset_table(self) -> Dict[str, str]:
        return dict(self._data.get("assets", {}))
