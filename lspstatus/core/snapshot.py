"""
Snapshot — Load a document tree and its connections from a file

A snapshot freezes what an editor would report at one moment:

    document:
      id_path: analysis.ipynb
      language: python
      foreign:
        - id_path: analysis.ipynb/r-1
          language: R
    connections:
      analysis.ipynb: {connected: true, initialized: true}
      analysis.ipynb/r-1: {connected: true}

Every document in the tree is registered with the registry in traversal
order. Connections may name id_paths outside the tree (a document closed
while its connection lingers).
"""

from pathlib import Path
from typing import Any, Dict, Tuple

import yaml

from .connections import Connection, ConnectionRegistry
from .documents import DEFAULT_MAX_DEPTH, VirtualDocument, collect_documents


class SnapshotError(ValueError):
    """Raised when a snapshot file is missing fields or mistyped."""
    pass


def _build_document(data: Any, where: str) -> VirtualDocument:
    if not isinstance(data, dict):
        raise SnapshotError(f"{where}: document must be a mapping")

    id_path = data.get("id_path")
    if not isinstance(id_path, str) or not id_path:
        raise SnapshotError(f"{where}: missing 'id_path'")

    language = data.get("language")
    if not isinstance(language, str) or not language:
        raise SnapshotError(f"{where} ({id_path}): missing 'language'")

    document = VirtualDocument(id_path=id_path, language=language)

    foreign = data.get("foreign", [])
    if not isinstance(foreign, list):
        raise SnapshotError(f"{where} ({id_path}): 'foreign' must be a list")
    for i, child in enumerate(foreign):
        document.add_foreign(_build_document(child, f"{where}.foreign[{i}]"))

    return document


def _build_connection(id_path: str, data: Any) -> Connection:
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SnapshotError(f"connections.{id_path}: must be a mapping")
    return Connection(
        id_path=id_path,
        connected=bool(data.get("connected", False)),
        initialized=bool(data.get("initialized", False)),
    )


def snapshot_from_dict(data: Dict[str, Any],
                       max_depth: int = DEFAULT_MAX_DEPTH) -> Tuple[VirtualDocument, ConnectionRegistry]:
    """
    Build a document tree and a populated registry from snapshot data.

    Raises:
        SnapshotError: If the data does not describe a valid snapshot
    """
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot must be a mapping")
    if "document" not in data:
        raise SnapshotError("Snapshot is missing 'document'")

    root = _build_document(data["document"], "document")

    connections = data.get("connections")
    if connections is None:
        connections = {}
    if not isinstance(connections, dict):
        raise SnapshotError("'connections' must be a mapping of id_path to flags")

    registry = ConnectionRegistry()
    for document in collect_documents(root, max_depth=max_depth):
        registry.documents[document.id_path] = document
    for id_path, flags in connections.items():
        registry.connections[str(id_path)] = _build_connection(str(id_path), flags)

    return root, registry


def load_snapshot(path: Path,
                  max_depth: int = DEFAULT_MAX_DEPTH) -> Tuple[VirtualDocument, ConnectionRegistry]:
    """
    Load a snapshot from a YAML or JSON file.

    Raises:
        SnapshotError: If the file cannot be read or parsed
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise SnapshotError(f"Cannot read snapshot {path}: {e}") from e
    except (yaml.YAMLError, ValueError) as e:
        raise SnapshotError(f"Cannot parse snapshot {path}: {e}") from e

    return snapshot_from_dict(data, max_depth=max_depth)
