"""
Node assembly for cockpit_graph.

Builds the graph nodes for collection entries and singletons, computes their
content digests and hands each node to the host's creation callback.
"""

import hashlib
import inspect
import json
import logging
from functools import lru_cache
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

import inflect

from ..models import NodeFailure, NodeInternal, SingletonDefinition
from .classifier import FieldGroups, classify_fields
from .localization import LocalizationComposer

Node = Dict[str, Any]
NodeCallback = Callable[[Node], Any]

SINGLETON_TYPE = "singleton"

_inflect = inflect.engine()


@lru_cache(maxsize=None)
def node_type_for(collection_name: str) -> str:
    """Singular form of a collection name, used as its node type."""
    return _inflect.singular_noun(collection_name) or collection_name


def content_digest(value: Any, locale: Optional[str] = None) -> str:
    """
    Calculate the md5 digest of a record's canonical JSON representation.

    Args:
        value: The raw record
        locale: Locale the node is built for, if any

    Returns:
        The digest as a hex string
    """
    payload = json.dumps(value, sort_keys=True, separators=(',', ':'), ensure_ascii=False, default=str)
    if locale:
        payload = f"{payload}_{locale}"
    return hashlib.md5(payload.encode('utf-8')).hexdigest()


class NodeAssembler:
    """
    Turns entries and singletons into graph nodes.

    Nodes are only ever created: each assembled node is passed to the creation
    callback exactly once and never modified afterwards.
    """

    def __init__(self, composer: LocalizationComposer, create_node: NodeCallback,
                 available_lngs: Optional[List[str]] = None):
        """
        Initialize the assembler.

        Args:
            composer: Field composer for entries
            create_node: Host callback receiving each node; may be sync or async
            available_lngs: Locales to build one node each for; empty builds one
                unlocalized node per entry
        """
        self.composer = composer
        self.create_node = create_node
        self.available_lngs = list(available_lngs or [])

    async def _emit(self, node: Node) -> Node:
        result = self.create_node(node)
        if inspect.isawaitable(result):
            await result
        return node

    async def assemble(self, collection_name: str, fields: Mapping, entry: Mapping,
                       locale: Optional[str] = None, groups: Optional[FieldGroups] = None) -> Node:
        """
        Build and emit the node for one entry in one locale.

        Args:
            collection_name: Name of the entry's collection
            fields: Field schema of the collection
            entry: Raw entry; never modified
            locale: Locale to compose, or None for the unlocalized node
            groups: Precomputed classification of fields

        Returns:
            The created node
        """
        groups = groups or classify_fields(fields)
        digest = content_digest(entry, locale)
        composed = await self.composer.compose(fields, groups, entry, locale)

        node: Node = dict(composed)
        if locale:
            node["lang"] = locale
        node.update({
            "id": f"{entry['_id']}_{locale}" if locale else str(entry["_id"]),
            "children": [],
            "parent": None,
            "internal": NodeInternal(type=node_type_for(collection_name), content_digest=digest)
                .model_dump(by_alias=True),
        })
        return await self._emit(node)

    async def assemble_entry(self, collection_name: str, fields: Mapping,
                             entry: Mapping) -> Tuple[List[Node], List[NodeFailure]]:
        """
        Build every node of an entry: one per configured locale, or a single
        unlocalized one.

        A failure in one locale is recorded and does not stop the others.

        Returns:
            Tuple of created nodes and recorded failures
        """
        groups = classify_fields(fields)
        nodes: List[Node] = []
        failures: List[NodeFailure] = []

        for locale in (self.available_lngs or [None]):
            try:
                nodes.append(await self.assemble(collection_name, fields, entry, locale, groups))
            except Exception as e:
                logging.error(f"Failed to build node for {collection_name} entry {entry.get('_id')} "
                              f"(locale {locale}): {e}")
                failures.append(NodeFailure(
                    collection=collection_name,
                    entry_id=str(entry.get("_id")) if entry.get("_id") is not None else None,
                    locale=locale,
                    error_type=type(e).__name__,
                    message=str(e),
                ))
        return nodes, failures

    async def assemble_singleton(self, singleton: SingletonDefinition) -> Node:
        """
        Build and emit the node for a singleton.

        The digest covers the singleton's raw data only; singletons have no
        locale dimension.
        """
        node: Node = dict(singleton.data)
        node.update({
            "name": singleton.name,
            "children": [],
            "parent": None,
            "id": f"singleton-{singleton.name}",
            "internal": NodeInternal(type=SINGLETON_TYPE, content_digest=content_digest(singleton.data))
                .model_dump(by_alias=True),
        })
        return await self._emit(node)
