"""
Base source interface for cockpit_graph.

This module defines the abstract interface every CMS content source implements.
"""

from abc import ABC, abstractmethod
from typing import Dict, List

from ..models import CollectionDefinition, SingletonDefinition


class BaseSource(ABC):
    """
    Abstract base class for all content sources.

    Each source delivers CMS collections and singletons (fetched from the API,
    read from an export, or hardcoded) as CollectionDefinition and
    SingletonDefinition objects.
    """

    @abstractmethod
    def get_collections(self) -> List[CollectionDefinition]:
        """
        Retrieve all collections with their field schemas and entries.

        Returns:
            List of CollectionDefinition objects
        """
        pass

    @abstractmethod
    def get_singletons(self) -> List[SingletonDefinition]:
        """
        Retrieve all singletons.

        Returns:
            List of SingletonDefinition objects
        """
        pass

    def get_asset_table(self) -> Dict[str, str]:
        """
        Retrieve the table of already downloaded assets, if the source has one.

        Returns:
            Mapping from asset path to asset node identity
        """
        return {}
