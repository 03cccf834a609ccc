"""
Build orchestration for cockpit_graph.

Runs the node assembler over every collection entry and singleton and
collects the created nodes together with any per-record failures.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from ..config import ConfigManager, get_config
from ..models import CollectionDefinition, NodeFailure, SingletonDefinition
from .assembler import Node, NodeAssembler, NodeCallback, SINGLETON_TYPE
from .assets import AssetLookup, Fetcher, InlineAssetResolver
from .layout import LayoutWalker
from .localization import LocalizationComposer


@dataclass
class BuildResult:
    """Nodes created by a build and the records that failed."""
    nodes: List[Node] = field(default_factory=list)
    failures: List[NodeFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class Orchestrator:
    """
    Creates the nodes for all collections and singletons of a build.
    """

    def __init__(self, assembler: NodeAssembler):
        self.assembler = assembler

    @classmethod
    def from_config(cls, lookup: AssetLookup, fetch: Fetcher, create_node: NodeCallback,
                    settings: Optional[ConfigManager] = None) -> "Orchestrator":
        """
        Wire the transformation pipeline from configuration.

        Args:
            lookup: Lookup for pre-downloaded assets
            fetch: Async fetch-and-cache operation for inline images
            create_node: Host node creation callback
            settings: Configuration to use (defaults to the global config)

        Returns:
            A ready Orchestrator
        """
        settings = settings or get_config()
        resolver = InlineAssetResolver(fetch, host=settings.host, static_prefix=settings.static_prefix)
        walker = LayoutWalker(lookup, resolver, settings.custom_components)
        composer = LocalizationComposer(
            lookup,
            walker,
            edge_suffix=settings.edge_suffix,
            files_suffix=settings.files_suffix,
            missing_relation=settings.missing_relation_policy,
        )
        return cls(NodeAssembler(composer, create_node, settings.available_lngs))

    async def _build_singleton(self, singleton: SingletonDefinition) -> Tuple[List[Node], List[NodeFailure]]:
        try:
            return [await self.assembler.assemble_singleton(singleton)], []
        except Exception as e:
            logging.error(f"Failed to build singleton {singleton.name}: {e}")
            return [], [NodeFailure(
                collection=SINGLETON_TYPE,
                entry_id=singleton.name,
                error_type=type(e).__name__,
                message=str(e),
            )]

    def _validate_collections(self, collections: Iterable[Union[CollectionDefinition, Mapping[str, Any]]]
                              ) -> Tuple[List[CollectionDefinition], List[NodeFailure]]:
        valid: List[CollectionDefinition] = []
        failures: List[NodeFailure] = []
        for collection in collections:
            if isinstance(collection, CollectionDefinition):
                valid.append(collection)
                continue
            try:
                valid.append(CollectionDefinition.model_validate(collection))
            except ValidationError as e:
                name = collection.get("name") if isinstance(collection, Mapping) else None
                logging.error(f"Skipping collection {name or '<unnamed>'}: {e}")
                failures.append(NodeFailure(
                    collection=str(name or "<unnamed>"),
                    error_type=type(e).__name__,
                    message=str(e),
                ))
        return valid, failures

    def _validate_singletons(self, singletons: Iterable[Union[SingletonDefinition, Mapping[str, Any]]]
                             ) -> Tuple[List[SingletonDefinition], List[NodeFailure]]:
        valid: List[SingletonDefinition] = []
        failures: List[NodeFailure] = []
        for singleton in singletons:
            if isinstance(singleton, SingletonDefinition):
                valid.append(singleton)
                continue
            try:
                valid.append(SingletonDefinition.model_validate(singleton))
            except ValidationError as e:
                name = singleton.get("name") if isinstance(singleton, Mapping) else None
                logging.error(f"Skipping singleton {name or '<unnamed>'}: {e}")
                failures.append(NodeFailure(
                    collection=SINGLETON_TYPE,
                    entry_id=str(name) if name else None,
                    error_type=type(e).__name__,
                    message=str(e),
                ))
        return valid, failures

    async def build(self, collections: Iterable[Union[CollectionDefinition, Mapping[str, Any]]],
                    singletons: Iterable[Union[SingletonDefinition, Mapping[str, Any]]] = ()) -> BuildResult:
        """
        Build the nodes of every entry and singleton.

        All records are processed concurrently; this returns only once every
        one of them has finished. A collection or singleton that cannot be read
        at all is recorded as a failure and the rest of the build goes on.

        Returns:
            BuildResult with nodes in input order and all recorded failures
        """
        collections, collection_failures = self._validate_collections(collections)
        singletons, singleton_failures = self._validate_singletons(singletons)

        jobs = [
            self.assembler.assemble_entry(collection.name, collection.fields, entry)
            for collection in collections
            for entry in collection.entries
        ]
        jobs.extend(self._build_singleton(singleton) for singleton in singletons)

        logging.info(f"Building nodes for {len(jobs)} records "
                     f"({len(collections)} collections, {len(singletons)} singletons)")

        result = BuildResult(failures=collection_failures + singleton_failures)
        for nodes, failures in await asyncio.gather(*jobs):
            result.nodes.extend(nodes)
            result.failures.extend(failures)

        logging.info(f"Created {len(result.nodes)} nodes with {len(result.failures)} failures")
        return result
