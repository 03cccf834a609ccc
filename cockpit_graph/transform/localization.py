"""
Per-locale field composition for cockpit_graph.

Localized fields store their translations under '<field>_<locale>'. For each
field group the composer picks the locale-specific key when it holds a value,
falls back to the base key otherwise, and turns the raw value into its graph
form.
"""

import copy
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..errors import MissingRelationTargetError
from .assets import AssetLookup
from .classifier import FieldGroups
from .layout import LayoutWalker, parse_layout

ComposedFields = Dict[str, Any]


def _is_localized(definition: Any) -> bool:
    if isinstance(definition, Mapping):
        return bool(definition.get("localize"))
    return bool(getattr(definition, "localize", False))


def _missing_path(value: Any) -> bool:
    return not isinstance(value, Mapping) or value.get("path") is None


def _missing_target(value: Any) -> bool:
    if isinstance(value, list):
        return not value
    return not isinstance(value, Mapping) or value.get("_id") is None


def _missing_value(value: Any) -> bool:
    return value is None


class LocalizationComposer:
    """
    Composes the field groups of one entry for one locale (or none).
    """

    def __init__(self, lookup: AssetLookup, walker: LayoutWalker, edge_suffix: str = "___NODE",
                 files_suffix: str = "_files", missing_relation: str = "warn"):
        """
        Initialize the composer.

        Args:
            lookup: Lookup for assets referenced by path
            walker: Walker for layout fields
            edge_suffix: Key suffix marking an owning-edge reference
            files_suffix: Suffix of the per-layout-field asset list
            missing_relation: 'warn' to skip missing relation targets, 'raise' to fail
        """
        self.lookup = lookup
        self.walker = walker
        self.edge_suffix = edge_suffix
        self.files_suffix = files_suffix
        self.missing_relation = missing_relation

    def resolve_key(self, fields: Mapping, field_name: str, entry: Mapping, locale: Optional[str],
                    is_missing: Callable[[Any], bool]) -> str:
        """
        Pick the entry key holding a field's value for a locale.

        Args:
            fields: Field schema of the collection
            field_name: Base field name
            entry: Raw entry
            locale: Target locale, or None for unlocalized composition
            is_missing: Absence rule for this field's type

        Returns:
            '<field_name>_<locale>' when the field is localized and that key holds
            a value, otherwise field_name
        """
        if locale and _is_localized(fields.get(field_name)):
            localized = f"{field_name}_{locale}"
            if not is_missing(entry.get(localized)):
                return localized
        return field_name

    def compose_assets(self, fields: Mapping, names: List[str], entry: Mapping,
                       locale: Optional[str] = None) -> ComposedFields:
        """Attach the owning asset node to image and asset fields."""
        composed: ComposedFields = {}
        for name in names:
            key = self.resolve_key(fields, name, entry, locale, _missing_path)
            value = entry.get(key)
            if _missing_path(value):
                continue
            identity = self.lookup.resolve(value["path"])
            if identity is None:
                logging.warning(f"No asset found for {name} path {value['path']}, skipping field")
                continue
            composed[name] = {**value, "localFile" + self.edge_suffix: identity}
        return composed

    def compose_relation_links(self, fields: Mapping, names: List[str], entry: Mapping,
                               locale: Optional[str] = None) -> ComposedFields:
        """
        Turn collection links into edges to the target entries' nodes.

        Raises:
            MissingRelationTargetError: When a target is missing and the policy is 'raise'
        """
        composed: ComposedFields = {}
        for name in names:
            key = self.resolve_key(fields, name, entry, locale, _missing_target)
            try:
                composed[name + self.edge_suffix] = self._target_ids(name, entry, entry.get(key), locale)
            except MissingRelationTargetError as e:
                if self.missing_relation == "raise":
                    raise
                logging.warning(f"{e}, skipping field")
        return composed

    def _target_ids(self, name: str, entry: Mapping, value: Any, locale: Optional[str]) -> Any:
        if isinstance(value, list):
            return [self._target_ids(name, entry, item, locale) for item in value]
        if _missing_target(value):
            raise MissingRelationTargetError(name, entry.get("_id"))
        target_id = str(value["_id"])
        return f"{target_id}_{locale}" if locale else target_id

    async def compose_layouts(self, fields: Mapping, names: List[str], entry: Mapping,
                              locale: Optional[str] = None) -> ComposedFields:
        """
        Walk layout fields and attach the assets they reference.

        Raises:
            MalformedLayoutError: When a string-encoded layout is not valid JSON
        """
        composed: ComposedFields = {}
        for name in names:
            key = self.resolve_key(fields, name, entry, locale, _missing_value)
            raw = entry.get(key)
            if raw is None:
                continue
            blocks = copy.deepcopy(parse_layout(raw, key))
            if not blocks:
                composed[name] = blocks
                continue

            result = await self.walker.walk(blocks, key)
            composed[name] = result.blocks
            if result.assets:
                files_key = name + self.files_suffix + self.edge_suffix
                composed[files_key] = composed.get(files_key, []) + result.assets
        return composed

    def compose_others(self, fields: Mapping, names: List[str], entry: Mapping,
                       locale: Optional[str] = None) -> ComposedFields:
        """Pass every remaining field through unchanged."""
        composed: ComposedFields = {}
        for name in names:
            key = self.resolve_key(fields, name, entry, locale, _missing_value)
            if key in entry:
                composed[name] = copy.deepcopy(entry[key])
        return composed

    async def compose(self, fields: Mapping, groups: FieldGroups, entry: Mapping,
                      locale: Optional[str] = None) -> ComposedFields:
        """
        Compose every field group and merge them.

        Later groups win on key collisions, in the order
        other < image < asset < relation link < layout.
        """
        merged: ComposedFields = {}
        merged.update(self.compose_others(fields, groups.other, entry, locale))
        merged.update(self.compose_assets(fields, groups.image, entry, locale))
        merged.update(self.compose_assets(fields, groups.asset, entry, locale))
        merged.update(self.compose_relation_links(fields, groups.relation_link, entry, locale))
        merged.update(await self.compose_layouts(fields, groups.layout, entry, locale))
        return merged
