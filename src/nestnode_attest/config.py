# -*- encoding: utf-8 -*-
"""
Registry bounds.

The defaults mirror the deployed contract: 64-character ids and names,
32-character device types, 32-byte digests, 100 devices per owner.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RegistryLimits:
    """Field and table bounds enforced by AttestationRegistry."""
    max_id_length: int = 64
    max_name_length: int = 64
    max_type_length: int = 32
    max_devices_per_owner: int = 100
    hash_length: int = 32

    def __post_init__(self):
        for name in (
            "max_id_length",
            "max_name_length",
            "max_type_length",
            "max_devices_per_owner",
            "hash_length",
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")

    def to_dict(self):
        return {
            "max_id_length": self.max_id_length,
            "max_name_length": self.max_name_length,
            "max_type_length": self.max_type_length,
            "max_devices_per_owner": self.max_devices_per_owner,
            "hash_length": self.hash_length,
        }


DEFAULT_LIMITS = RegistryLimits()
