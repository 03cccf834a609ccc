#!/usr/bin/env python3
"""
cockpit_graph - CMS content to site graph nodes

Main entry point. Loads collections and singletons from a source, runs the
transformation pipeline and stores the resulting nodes in the node store.
"""

import asyncio
import logging
import sys
import argparse

from cockpit_graph import __version__
from cockpit_graph.config import config
from cockpit_graph.database import NodeStore
from cockpit_graph.fetch import RemoteAssetCache
from cockpit_graph.sources import BaseSource, JSONExportSource, MockSource
from cockpit_graph.transform import AssetLookup, BuildResult, Orchestrator


def setup_logging():
    """Configure logging for the application."""
    level = getattr(logging, config.get("logging.level", "INFO").upper())
    format_str = config.get("logging.format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    log_file = config.log_filename

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_file)
        ]
    )


def get_source(source_type: str, export_path: str = None) -> BaseSource:
    """
    Create the content source for a run.

    Args:
        source_type: 'mock' or 'json'
        export_path: Path to the JSON export (required for the json source)

    Returns:
        The configured source
    """
    if source_type == "mock":
        return MockSource()
    if source_type == "json":
        if not export_path:
            raise ValueError("--export is required for the json source")
        return JSONExportSource(export_path)
    raise ValueError(f"Unknown source type: {source_type}")


async def run_build(source: BaseSource, assets_path: str = None, db_path: str = None) -> BuildResult:
    """
    Build all nodes of a source into the node store.

    Args:
        source: Content source
        assets_path: Optional JSON asset manifest; defaults to the source's own table
        db_path: Node store database file (defaults to config value)

    Returns:
        The BuildResult of the run
    """
    lookup = AssetLookup.from_file(assets_path) if assets_path else AssetLookup(source.get_asset_table())
    logging.info(f"Asset table holds {len(lookup)} assets")

    with NodeStore(db_path or config.database_filename) as store:
        store.initialize_database()
        async with RemoteAssetCache() as fetcher:
            orchestrator = Orchestrator.from_config(lookup, fetcher, store.create_node)
            result = await orchestrator.build(source.get_collections(), source.get_singletons())
        logging.info(f"Node store now holds {store.count_nodes()} nodes")
    return result


def parse_arguments():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="cockpit_graph - CMS content to site graph nodes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                                        # Build the mock content
  python main.py --source json --export cms.json        # Build a JSON export
  python main.py --source json --export cms.json --assets assets.json --strict
        """
    )

    parser.add_argument(
        "--source",
        choices=["mock", "json"],
        default="mock",
        help="Content source to use (default: mock)"
    )

    parser.add_argument(
        "--export",
        type=str,
        help="Path to the JSON export (required for the json source)"
    )

    parser.add_argument(
        "--assets",
        type=str,
        help="JSON manifest mapping downloaded asset paths to asset node ids"
    )

    parser.add_argument(
        "--db",
        type=str,
        help="Node store database file (default from config)"
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with a non-zero status if any record failed"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"cockpit_graph {__version__}"
    )

    return parser.parse_args()


def main():
    """Main entry point."""
    args = parse_arguments()
    setup_logging()

    logging.info("cockpit_graph - CMS content to site graph nodes")

    try:
        source = get_source(args.source, args.export)
        result = asyncio.run(run_build(source, args.assets, args.db))
    except KeyboardInterrupt:
        logging.info("Build interrupted by user")
        print("\nBuild interrupted.")
        sys.exit(130)
    except Exception as e:
        logging.error(f"Build failed: {e}")
        print(f"\nBuild failed: {e}")
        sys.exit(1)

    print(f"\nCreated {len(result.nodes)} nodes.")
    if result.failures:
        print(f"{len(result.failures)} records failed:")
        for failure in result.failures:
            locale = f" [{failure.locale}]" if failure.locale else ""
            print(f"  - {failure.collection}/{failure.entry_id}{locale}: {failure.error_type}: {failure.message}")
        if args.strict:
            sys.exit(2)


if __name__ == "__main__":
    main()
