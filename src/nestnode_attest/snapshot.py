# -*- encoding: utf-8 -*-
"""
Registry snapshots on disk.

A snapshot is the JSON form of AttestationRegistry.to_dict(). Loading one
yields a fresh registry with the same four tables; inconsistent snapshots
are refused rather than partially loaded.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from .config import RegistryLimits
from .errors import SnapshotError
from .registry import AttestationRegistry

logger = logging.getLogger(__name__)


def save_snapshot(registry: AttestationRegistry, path: Path) -> None:
    """Save registry state to disk."""
    path = Path(path)
    data = registry.to_dict()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
    logger.info(
        f"Saved snapshot to {path}: {len(data['nest_nodes'])} NestNodes, "
        f"{len(data['devices'])} devices, {len(data['activity_logs'])} logs"
    )


def load_snapshot(
    path: Path,
    limits: Optional[RegistryLimits] = None,
) -> Optional[AttestationRegistry]:
    """
    Load registry state from disk.

    Returns:
        Restored registry, or None if path does not exist

    Raises:
        SnapshotError: file is not valid JSON or its tables are inconsistent
    """
    path = Path(path)
    if not path.exists():
        return None

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise SnapshotError(f"Snapshot {path} is not valid UTF-8 JSON: {e}") from e
    if not isinstance(data, dict):
        raise SnapshotError(f"Snapshot {path} must hold a JSON object")

    registry = AttestationRegistry.from_dict(data, limits=limits)
    logger.info(f"Loaded snapshot from {path}: {registry.get_storage_stats()}")
    return registry
