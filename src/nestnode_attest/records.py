# -*- encoding: utf-8 -*-
"""
Registry records and field validation.

Records are immutable once written, so they are frozen dataclasses. Digests
are held as raw bytes and serialized as lowercase hex.
"""

from dataclasses import dataclass
from typing import Any, Dict

from .errors import InvalidField


@dataclass(frozen=True)
class NestNode:
    """The single hub registered by an owner."""
    nest_node_id: str
    registration_time: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nest_node_id": self.nest_node_id,
            "registration_time": self.registration_time,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NestNode":
        return cls(
            nest_node_id=data["nest_node_id"],
            registration_time=data["registration_time"],
        )


@dataclass(frozen=True)
class Device:
    """A device registered under an owner's hub."""
    device_name: str
    device_type: str
    registration_time: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "device_name": self.device_name,
            "device_type": self.device_type,
            "registration_time": self.registration_time,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Device":
        return cls(
            device_name=data["device_name"],
            device_type=data["device_type"],
            registration_time=data["registration_time"],
        )


@dataclass(frozen=True)
class ActivityLog:
    """
    Attestation of one device action.

    Only digests are kept: action_hash covers the raw action payload and
    attestation_hash binds device id, timestamp and action together. The
    raw activity data never reaches the registry.
    """
    action_hash: bytes
    attestation_hash: bytes

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action_hash": self.action_hash.hex(),
            "attestation_hash": self.attestation_hash.hex(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ActivityLog":
        return cls(
            action_hash=bytes.fromhex(data["action_hash"]),
            attestation_hash=bytes.fromhex(data["attestation_hash"]),
        )


# ---------------------------------------------------------------------------
# Field validation
# ---------------------------------------------------------------------------


def check_bounded_str(field: str, value: Any, max_length: int) -> str:
    """Return value if it is a str of at most max_length characters."""
    if not isinstance(value, str):
        raise InvalidField(field, f"expected str, got {type(value).__name__}")
    if len(value) > max_length:
        raise InvalidField(field, f"length {len(value)} exceeds {max_length}")
    return value


def check_caller(value: Any) -> str:
    """Return value if it is a str owner identity."""
    if not isinstance(value, str):
        raise InvalidField("caller", f"expected str, got {type(value).__name__}")
    return value


def check_uint(field: str, value: Any) -> int:
    """Return value if it is a non-negative int (bool excluded)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidField(field, f"expected unsigned int, got {type(value).__name__}")
    if value < 0:
        raise InvalidField(field, f"must be >= 0, got {value}")
    return value


def check_digest(field: str, value: Any, length: int) -> bytes:
    """Return value as bytes if it is a bytes-like digest of exactly length bytes."""
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise InvalidField(field, f"expected bytes, got {type(value).__name__}")
    raw = bytes(value)
    if len(raw) != length:
        raise InvalidField(field, f"expected {length} bytes, got {len(raw)}")
    return raw
