"""
Unit tests for core cockpit_graph components.

Tests non-pipeline components like configuration management, the node store,
data models and content sources.
"""

import json
import shutil
import tempfile
import unittest
from pathlib import Path

from cockpit_graph.config import ConfigManager
from cockpit_graph.database import NodeStore
from cockpit_graph.models import CollectionDefinition, FieldDefinition, RemoteAsset, SingletonDefinition
from cockpit_graph.sources import JSONExportSource, MockSource
from cockpit_graph.transform import AssetLookup


class TestConfigManager(unittest.TestCase):
    """Test configuration management functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.config_path = Path(self.temp_dir) / "test_config.yaml"

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.temp_dir)

    def test_config_creation_with_defaults(self):
        """Test config manager falls back to defaults when file missing."""
        config = ConfigManager(str(self.config_path))

        self.assertEqual(config.host, "")
        self.assertEqual(config.available_lngs, [])
        self.assertEqual(config.custom_components, [])
        self.assertEqual(config.edge_suffix, "___NODE")
        self.assertEqual(config.static_prefix, "/static/")
        self.assertEqual(config.missing_relation_policy, "warn")

    def test_config_loading_from_file(self):
        """Test loading configuration from YAML file."""
        test_config = """
cockpit:
  host: "https://cms.example.com"

i18n:
  available_lngs: ["en", "de"]

layout:
  custom_components: ["gallery", "image"]

graph:
  missing_relation: "raise"
"""
        with open(self.config_path, 'w') as f:
            f.write(test_config)

        config = ConfigManager(str(self.config_path))

        self.assertEqual(config.host, "https://cms.example.com")
        self.assertEqual(config.available_lngs, ["en", "de"])
        self.assertEqual(config.custom_components, ["gallery", "image"])
        self.assertEqual(config.missing_relation_policy, "raise")
        # Keys absent from the file keep their defaults
        self.assertEqual(config.edge_suffix, "___NODE")

    def test_bundled_config_enables_mock_gallery(self):
        """Test the shipped config.yaml resolves the mock source's gallery component."""
        bundled = Path(__file__).resolve().parent.parent / "config.yaml"
        config = ConfigManager(str(bundled))

        self.assertIn("gallery", config.custom_components)
        self.assertEqual(config.available_lngs, ["en", "fr"])
        self.assertEqual(config.edge_suffix, "___NODE")

    def test_dot_notation_access(self):
        """Test accessing config values with dot notation."""
        config = ConfigManager(str(self.config_path))  # Uses defaults

        self.assertEqual(config.get("graph.files_suffix"), "_files")
        self.assertEqual(config.get("database.filename"), "nodes.db")
        self.assertEqual(config.get("nonexistent.key", "default"), "default")

    def test_config_reload(self):
        """Test configuration reloading."""
        with open(self.config_path, 'w') as f:
            f.write("cockpit:\n  host: 'https://one.example.com'")

        config = ConfigManager(str(self.config_path))
        self.assertEqual(config.host, "https://one.example.com")

        with open(self.config_path, 'w') as f:
            f.write("cockpit:\n  host: 'https://two.example.com'")

        config.reload()
        self.assertEqual(config.host, "https://two.example.com")


class TestDataModels(unittest.TestCase):
    """Test data model validation and functionality."""

    def test_collection_fields_from_mapping(self):
        """Test field schemas given as a mapping."""
        collection = CollectionDefinition(
            name="posts",
            fields={"title": {"type": "text", "localize": True}},
            entries=[{"_id": "p1", "title": "Hi"}]
        )

        self.assertEqual(collection.fields["title"], FieldDefinition(type="text", localize=True))
        self.assertEqual(len(collection.entries), 1)

    def test_collection_fields_from_list(self):
        """Test field schemas in the CMS list form."""
        collection = CollectionDefinition.model_validate({
            "name": "posts",
            "fields": [
                {"name": "title", "type": "text", "localize": True, "label": "Title"},
                {"name": "cover", "type": "image"},
            ],
        })

        self.assertEqual(list(collection.fields), ["title", "cover"])
        self.assertTrue(collection.fields["title"].localize)
        self.assertFalse(collection.fields["cover"].localize)
        self.assertEqual(collection.entries, [])

    def test_null_schema_values_use_defaults(self):
        """Test nulls in exported schemas fall back to field defaults."""
        self.assertEqual(FieldDefinition.model_validate({"type": None, "localize": None}), FieldDefinition())

        collection = CollectionDefinition.model_validate({
            "name": "posts",
            "fields": [{"name": "title", "type": None, "localize": None}],
        })
        self.assertEqual(collection.fields["title"], FieldDefinition(type="", localize=False))

    def test_remote_asset_aliases(self):
        """Test RemoteAsset accepts both field names and aliases."""
        by_alias = RemoteAsset.model_validate({"contentDigest": "abc", "ext": ".png", "name": "a"})
        by_name = RemoteAsset(content_digest="abc", ext=".png", name="a")

        self.assertEqual(by_alias, by_name)
        self.assertEqual(by_name.static_filename, "a-abc.png")


class TestNodeStore(unittest.TestCase):
    """Test node store functionality."""

    def setUp(self):
        """Set up test database."""
        self.temp_dir = tempfile.mkdtemp()
        self.db_path = Path(self.temp_dir) / "test.db"

    def tearDown(self):
        """Clean up test database."""
        shutil.rmtree(self.temp_dir)

    def make_node(self, node_id, node_type="post", digest="d1", **fields):
        return {
            **fields,
            "id": node_id,
            "children": [],
            "parent": None,
            "internal": {"type": node_type, "contentDigest": digest},
        }

    def test_database_initialization(self):
        """Test database creation and table initialization."""
        with NodeStore(str(self.db_path)) as store:
            store.initialize_database()

            self.assertTrue(self.db_path.exists())
            self.assertEqual(store.count_nodes(), 0)

    def test_requires_connection(self):
        """Test operations fail without a connection."""
        store = NodeStore(str(self.db_path))
        with self.assertRaises(RuntimeError):
            store.count_nodes()

    def test_node_operations(self):
        """Test storing and reading nodes."""
        with NodeStore(str(self.db_path)) as store:
            store.initialize_database()

            self.assertTrue(store.create_node(self.make_node("p1", title="Hello")))
            self.assertTrue(store.create_node(self.make_node("singleton-home", node_type="singleton")))

            node = store.get_node("p1")
            self.assertIsNotNone(node)
            if node:  # Type guard for linter
                self.assertEqual(node["title"], "Hello")
                self.assertEqual(node["internal"]["contentDigest"], "d1")

            self.assertIsNone(store.get_node("missing"))
            self.assertEqual([n["id"] for n in store.list_nodes("post")], ["p1"])
            self.assertEqual(store.count_nodes(), 2)

    def test_unchanged_node_is_not_rewritten(self):
        """Test digest-based change detection."""
        with NodeStore(str(self.db_path)) as store:
            store.initialize_database()

            self.assertTrue(store.create_node(self.make_node("p1", title="Hello")))
            self.assertFalse(store.create_node(self.make_node("p1", title="Hello")))
            self.assertTrue(store.node_is_current("p1", "d1"))

            self.assertTrue(store.create_node(self.make_node("p1", digest="d2", title="Changed")))
            self.assertFalse(store.node_is_current("p1", "d1"))
            self.assertEqual(store.get_node("p1")["title"], "Changed")
            self.assertEqual(store.count_nodes(), 1)


class TestSources(unittest.TestCase):
    """Test content sources."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.export_path = Path(self.temp_dir) / "export.json"

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def test_mock_source(self):
        """Test the mock source covers every field type."""
        source = MockSource()
        collections = source.get_collections()

        self.assertEqual([c.name for c in collections], ["authors", "posts"])
        types = {definition.type for c in collections for definition in c.fields.values()}
        self.assertTrue({"image", "collectionlink", "layout"}.issubset(types))
        self.assertEqual(source.get_singletons()[0].name, "home")
        self.assertEqual(len(source.get_asset_table()), 4)

    def test_json_export_source(self):
        """Test reading collections, singletons and assets from an export."""
        export = {
            "collections": [
                {"name": "posts", "fields": [{"name": "title", "type": "text"}], "entries": [{"_id": "p1"}]},
                {"fields": {}},
            ],
            "singletons": [{"name": "home", "data": {"title": "Hi"}}],
            "assets": {"storage/uploads/a.png": "asset-a"},
        }
        with open(self.export_path, 'w', encoding='utf-8') as f:
            json.dump(export, f)

        source = JSONExportSource(str(self.export_path))

        with self.assertLogs(level="WARNING"):
            collections = source.get_collections()
        self.assertEqual([c.name for c in collections], ["posts"])
        self.assertEqual(source.get_singletons(), [SingletonDefinition(name="home", data={"title": "Hi"})])
        self.assertEqual(source.get_asset_table(), {"storage/uploads/a.png": "asset-a"})

    def test_missing_export_file(self):
        """Test a missing export is reported immediately."""
        with self.assertRaises(FileNotFoundError):
            JSONExportSource(str(self.export_path))

    def test_asset_manifest(self):
        """Test loading the asset lookup table from a manifest file."""
        manifest = Path(self.temp_dir) / "assets.json"
        with open(manifest, 'w', encoding='utf-8') as f:
            json.dump({"https://cms.example.com/storage/uploads/a.png": "asset-a"}, f)

        lookup = AssetLookup.from_file(str(manifest))

        self.assertEqual(len(lookup), 1)
        self.assertEqual(lookup.resolve("/storage/uploads/a.png"), "asset-a")


if __name__ == '__main__':
    # Run all tests
    unittest.main()
