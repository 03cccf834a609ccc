"""
Rich layout traversal for cockpit_graph.

A layout field holds an ordered tree of blocks. Each block has a 'component'
tag and a 'settings' mapping, and may nest further blocks under 'children'
or 'columns'. Walking a layout rewrites inline images in text and html blocks
and resolves the asset references of custom components.
"""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional

from ..errors import MalformedLayoutError
from .assets import AssetLookup, InlineAssetResolver

TEXT_COMPONENTS = ("text", "html")


def parse_layout(value: Any, field_name: str) -> List[Any]:
    """
    Turn a raw layout field value into a list of blocks.

    String values are parsed as strict JSON; they are never evaluated.

    Raises:
        MalformedLayoutError: If the string is not JSON or the value is not a list
    """
    if value is None:
        return []
    if isinstance(value, str):
        if not value.strip():
            return []
        try:
            value = json.loads(value)
        except json.JSONDecodeError as e:
            raise MalformedLayoutError(field_name, str(e)) from e
    if not isinstance(value, list):
        raise MalformedLayoutError(field_name, f"expected a list of blocks, got {type(value).__name__}")
    return value


def distinct(items: Iterable[str]) -> List[str]:
    """Drop repeated items, keeping first-seen order."""
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


@dataclass
class LayoutResult:
    blocks: List[Any] = field(default_factory=list)
    assets: List[str] = field(default_factory=list)


class LayoutWalker:
    """
    Walks layout trees, rewriting embedded asset references.

    Blocks are updated in place, so callers hand in a copy of any layout
    they need to keep untouched.
    """

    def __init__(self, lookup: AssetLookup, inline_resolver: InlineAssetResolver,
                 custom_components: Optional[Iterable[str]] = None):
        """
        Initialize the walker.

        Args:
            lookup: Lookup for pre-downloaded assets referenced by path
            inline_resolver: Resolver for images embedded in rich text
            custom_components: Component tags whose settings may hold asset references
        """
        self.lookup = lookup
        self.inline = inline_resolver
        self.custom_components = set(custom_components or [])

    async def walk(self, blocks: List[Any], field_name: str, is_column: bool = False) -> LayoutResult:
        """
        Walk a list of blocks and everything nested below them.

        All text rewrites have completed when this returns.

        Args:
            blocks: Layout blocks to walk
            field_name: Name of the layout field, for diagnostics
            is_column: Whether these blocks are the columns of a parent block

        Returns:
            LayoutResult with the rewritten blocks and the distinct asset
            identities they reference, in first-seen order
        """
        assets: List[str] = []
        text_rewrites = []

        for block in blocks:
            if not isinstance(block, dict):
                continue
            component = block.get("component")
            settings = block.get("settings")
            has_settings = isinstance(settings, dict)

            if has_settings and component in TEXT_COMPONENTS:
                text_rewrites.append(self._rewrite_text(settings))

            if has_settings and component in self.custom_components:
                assets.extend(self._resolve_custom_component(settings))

            if isinstance(block.get("children"), list):
                logging.debug(f"{field_name}: {'column' if is_column else 'component ' + str(component)} children")
                children = await self.walk(block["children"], field_name)
                block["children"] = children.blocks
                assets.extend(children.assets)

            if isinstance(block.get("columns"), list):
                logging.debug(f"{field_name}: {component} columns")
                columns = await self.walk(block["columns"], field_name, is_column=True)
                block["columns"] = columns.blocks
                assets.extend(columns.assets)

        if text_rewrites:
            outcomes = await asyncio.gather(*text_rewrites, return_exceptions=True)
            for outcome in outcomes:
                if isinstance(outcome, BaseException):
                    raise outcome

        return LayoutResult(blocks=blocks, assets=distinct(assets))

    async def _rewrite_text(self, settings: dict) -> None:
        inline = await self.inline.resolve(settings.get("text") or settings.get("html"))
        if not inline.source_urls:
            return
        for key in TEXT_COMPONENTS:
            if isinstance(settings.get(key), str) and settings[key]:
                settings[key] = self.inline.substitute(settings[key], inline)

    def _resolve_custom_component(self, settings: dict) -> List[str]:
        assets: List[str] = []
        for value in settings.values():
            assets.extend(self._resolve_setting(value))
        return distinct(assets)

    def _resolve_setting(self, setting: Any) -> List[str]:
        # A single image: {"path": ...}
        if isinstance(setting, dict) and "path" in setting:
            return self._attach(setting)
        # A gallery: [{"path": ...}, ...]
        if isinstance(setting, list) and setting and isinstance(setting[0], dict) and "path" in setting[0]:
            assets: List[str] = []
            for image in setting:
                if isinstance(image, dict):
                    assets.extend(self._attach(image))
            return assets
        return []

    def _attach(self, image: dict) -> List[str]:
        identity = self.lookup.resolve(image.get("path"))
        if not identity:
            return []
        image["localFileId"] = identity
        return [identity]
