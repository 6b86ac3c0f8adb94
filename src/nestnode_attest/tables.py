# -*- encoding: utf-8 -*-
"""
KeyedTable - append-only point-lookup table.

Backs each of the registry's four tables. A table supports exact-key
lookup, insert-if-absent and ordered iteration. Rows are never updated or
deleted.

Tables do not lock. AttestationRegistry holds one lock across all of its
tables so that a check on one table and a write to another happen in the
same critical section.

Usage:
    devices: KeyedTable[Tuple[str, str], Device] = KeyedTable("devices")
    if not devices.insert(("alice", "cam-1"), device):
        raise DeviceAlreadyRegistered(...)
"""

from typing import (
    Dict,
    Generic,
    Hashable,
    Iterator,
    Optional,
    Tuple,
    TypeVar,
)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class KeyedTable(Generic[K, V]):
    """Insert-once mapping from a composite key to an immutable record."""

    def __init__(self, name: str):
        self.name = name
        self._rows: Dict[K, V] = {}

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, key: K) -> Optional[V]:
        return self._rows.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._rows

    def __len__(self) -> int:
        return len(self._rows)

    def items(self) -> Iterator[Tuple[K, V]]:
        """Rows in insertion order."""
        return iter(list(self._rows.items()))

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def insert(self, key: K, value: V) -> bool:
        """
        Insert value under key unless the key is already present.

        Returns:
            True if inserted, False if the key existed (row left untouched)
        """
        if key in self._rows:
            return False
        self._rows[key] = value
        return True

    def __repr__(self) -> str:
        return f"KeyedTable({self.name!r}, rows={len(self._rows)})"
