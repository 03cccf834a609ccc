"""
Node store for cockpit_graph.

This module keeps the created graph nodes in DuckDB. NodeStore.create_node is
the host creation callback handed to the node assembler.
"""

import duckdb
import json
import logging
from typing import Any, Dict, List, Optional
from datetime import datetime


class NodeStore:
    """
    Manages the DuckDB database holding created graph nodes.
    """

    def __init__(self, db_path: str = "nodes.db"):
        """
        Initialize the node store.

        Args:
            db_path: Path to the DuckDB database file
        """
        self.db_path = db_path
        self.connection = None

    def connect(self):
        """Establish connection to the database."""
        self.connection = duckdb.connect(self.db_path)

    def disconnect(self):
        """Close the database connection."""
        if self.connection:
            self.connection.close()
            self.connection = None

    def __enter__(self):
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.disconnect()

    def _require_connection(self):
        if not self.connection:
            raise RuntimeError("Database connection not established")
        return self.connection

    def initialize_database(self):
        """
        Create the nodes table if it doesn't exist.
        """
        connection = self._require_connection()
        connection.execute("""
            CREATE TABLE IF NOT EXISTS nodes (
                node_id VARCHAR PRIMARY KEY,
                node_type VARCHAR NOT NULL,
                content_digest VARCHAR NOT NULL,
                data TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

    def node_is_current(self, node_id: str, content_digest: str) -> bool:
        """
        Check whether a node with this id and digest is already stored.

        Args:
            node_id: The node id
            content_digest: The node's content digest

        Returns:
            True if the stored node has the same digest
        """
        connection = self._require_connection()
        result = connection.execute("""
            SELECT content_digest FROM nodes WHERE node_id = ?
        """, [node_id]).fetchone()
        return bool(result) and result[0] == content_digest

    def create_node(self, node: Dict[str, Any]) -> bool:
        """
        Store a created node.

        Storing an id that already exists with the same digest is a no-op;
        a different digest replaces the stored node.

        Args:
            node: The assembled node

        Returns:
            True if the node was written, False if it was already current
        """
        connection = self._require_connection()
        internal = node["internal"]
        node_id = node["id"]
        digest = internal["contentDigest"]

        if self.node_is_current(node_id, digest):
            logging.debug(f"Node {node_id} unchanged")
            return False

        data = json.dumps(node, ensure_ascii=False, default=str)
        exists = connection.execute("""
            SELECT 1 FROM nodes WHERE node_id = ?
        """, [node_id]).fetchone()

        if exists:
            connection.execute("""
                UPDATE nodes
                SET node_type = ?, content_digest = ?, data = ?, created_at = ?
                WHERE node_id = ?
            """, [internal["type"], digest, data, datetime.now(), node_id])
        else:
            connection.execute("""
                INSERT INTO nodes (node_id, node_type, content_digest, data, created_at)
                VALUES (?, ?, ?, ?, ?)
            """, [node_id, internal["type"], digest, data, datetime.now()])
        return True

    def get_node(self, node_id: str) -> Optional[Dict[str, Any]]:
        """
        Retrieve a node by id.

        Args:
            node_id: The id of the node to retrieve

        Returns:
            The node if found, None otherwise
        """
        connection = self._require_connection()
        result = connection.execute("""
            SELECT data FROM nodes WHERE node_id = ?
        """, [node_id]).fetchone()
        if result:
            return json.loads(result[0])
        return None

    def list_nodes(self, node_type: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        List all nodes, optionally filtered by type.

        Args:
            node_type: Optional filter by node type

        Returns:
            List of nodes ordered by id
        """
        connection = self._require_connection()
        if node_type:
            results = connection.execute("""
                SELECT data FROM nodes
                WHERE node_type = ?
                ORDER BY node_id
            """, [node_type]).fetchall()
        else:
            results = connection.execute("""
                SELECT data FROM nodes
                ORDER BY node_id
            """).fetchall()
        return [json.loads(row[0]) for row in results]

    def count_nodes(self) -> int:
        """Count stored nodes."""
        connection = self._require_connection()
        return connection.execute("SELECT COUNT(*) FROM nodes").fetchone()[0]
