"""
Mock source for testing cockpit_graph.

This module provides hardcoded collections and singletons for exercising the
pipeline without a CMS.
"""

import json
from typing import Dict, List

from ..models import CollectionDefinition, SingletonDefinition
from .base import BaseSource


class MockSource(BaseSource):
    """
    Mock source that returns hardcoded test content.

    Covers every field type: localized scalars, images, collection links and a
    string-encoded layout with a custom gallery component.

    The gallery images only resolve when 'gallery' is listed in
    layout.custom_components, as in the bundled config.yaml.
    """

    def get_collections(self) -> List[CollectionDefinition]:
        """
        Return the hardcoded collections.

        Returns:
            An 'authors' and a 'posts' collection
        """
        authors = CollectionDefinition(
            name="authors",
            fields={
                "name": {"type": "text"},
                "avatar": {"type": "image"},
            },
            entries=[
                {
                    "_id": "author-1",
                    "name": "Jane Doe",
                    "avatar": {"path": "/storage/uploads/jane.png"},
                },
            ],
        )

        layout = [
            {
                "component": "text",
                "settings": {"text": "<p>Hello from the mock source</p>"},
            },
            {
                "component": "section",
                "settings": {},
                "children": [
                    {
                        "component": "gallery",
                        "settings": {
                            "gallery": [
                                {"path": "/storage/uploads/one.jpg"},
                                {"path": "/storage/uploads/two.jpg"},
                            ],
                        },
                    },
                ],
            },
        ]

        posts = CollectionDefinition(
            name="posts",
            fields=[
                {"name": "title", "type": "text", "localize": True},
                {"name": "cover", "type": "image"},
                {"name": "author", "type": "collectionlink"},
                {"name": "body", "type": "layout", "localize": True},
            ],
            entries=[
                {
                    "_id": "post-1",
                    "title": "Hello world",
                    "title_fr": "Bonjour le monde",
                    "cover": {"path": "/storage/uploads/cover.jpg"},
                    "author": {"_id": "author-1", "display": "Jane Doe"},
                    "body": json.dumps(layout),
                },
            ],
        )
        return [authors, posts]

    def get_singletons(self) -> List[SingletonDefinition]:
        """
        Return the hardcoded singletons.
        """
        return [SingletonDefinition(name="home", data={"title": "Welcome", "tagline": "A mock site"})]

    def get_asset_table(self) -> Dict[str, str]:
        return {
            "https://cms.example.com/storage/uploads/jane.png": "asset-jane",
            "https://cms.example.com/storage/uploads/cover.jpg": "asset-cover",
            "https://cms.example.com/storage/uploads/one.jpg": "asset-one",
            "https://cms.example.com/storage/uploads/two.jpg": "asset-two",
        }
