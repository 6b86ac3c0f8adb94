# -*- encoding: utf-8 -*-
"""
AttestationRegistry - tamper-evident record of NestNode device activity.

A homeowner registers one hub (NestNode), registers devices beneath it, and
logs attestations of device actions. Only digests are stored; the raw
activity data stays with the owner.

Four tables, all keyed by value:
- nest_nodes:     owner -> NestNode
- devices:        (owner, device_id) -> Device
- owner_devices:  owner -> [device_id, ...]  (registration order, capped)
- activity_logs:  (owner, device_id, timestamp) -> ActivityLog

Every row is written once and never changed. Each mutating operation runs
its precondition checks and writes under one lock, so two callers racing
for the same key cannot both succeed.

Usage:
    from nestnode_attest import AttestationRegistry, BlockCounter

    registry = AttestationRegistry()
    blocks = BlockCounter()

    registry.register_nest_node("alice", "home-1", block_height=blocks.advance())
    registry.register_device(
        "alice", "cam-1", "Front Camera", "security-camera",
        block_height=blocks.advance(),
    )
    registry.log_device_activity("alice", "cam-1", 1000, action_hash, attestation_hash)

    registry.verify_activity_attestation("alice", "cam-1", 1000, attestation_hash)
"""

import hmac
import logging
import threading
from typing import Any, Dict, List, Optional, Tuple

from .config import DEFAULT_LIMITS, RegistryLimits
from .errors import (
    AttestationExists,
    DeviceAlreadyRegistered,
    DeviceLimitReached,
    DeviceNotRegistered,
    NestNodeAlreadyRegistered,
    NestNodeNotRegistered,
    RegistryError,
    SnapshotError,
)
from .records import (
    ActivityLog,
    Device,
    NestNode,
    check_bounded_str,
    check_caller,
    check_digest,
    check_uint,
)
from .tables import KeyedTable

logger = logging.getLogger(__name__)

DeviceKey = Tuple[str, str]
LogKey = Tuple[str, str, int]


class AttestationRegistry:
    """
    Registration and attestation store for NestNode owners.

    Caller identity and block height are supplied by the host on every
    mutating call and trusted as given. Failures raise a RegistryError
    subclass before anything is written; reads never raise.
    """

    def __init__(self, limits: RegistryLimits = DEFAULT_LIMITS):
        self._limits = limits
        self._nest_nodes: KeyedTable[str, NestNode] = KeyedTable("nest_nodes")
        self._devices: KeyedTable[DeviceKey, Device] = KeyedTable("devices")
        self._owner_devices: Dict[str, List[str]] = {}
        self._activity_logs: KeyedTable[LogKey, ActivityLog] = KeyedTable("activity_logs")
        self._lock = threading.Lock()

    @property
    def limits(self) -> RegistryLimits:
        return self._limits

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_nest_node(
        self,
        caller: str,
        nest_node_id: str,
        block_height: int,
    ) -> NestNode:
        """
        Register the caller's hub. An owner gets exactly one, ever.

        Raises:
            NestNodeAlreadyRegistered: caller already has a NestNode
            InvalidField: caller not a str, nest_node_id too long or
                block_height not a uint
        """
        check_caller(caller)
        check_bounded_str("nest_node_id", nest_node_id, self._limits.max_id_length)
        check_uint("block_height", block_height)

        node = NestNode(nest_node_id=nest_node_id, registration_time=block_height)
        with self._lock:
            if not self._nest_nodes.insert(caller, node):
                logger.debug(f"Rejected NestNode {nest_node_id!r}: {caller} already registered")
                raise NestNodeAlreadyRegistered(f"NestNode already registered for {caller}")

        logger.info(f"Registered NestNode {nest_node_id!r} for {caller} at block {block_height}")
        return node

    def register_device(
        self,
        caller: str,
        device_id: str,
        device_name: str,
        device_type: str,
        block_height: int,
    ) -> Device:
        """
        Register a device under the caller's NestNode and append it to the
        caller's device index.

        Raises:
            NestNodeNotRegistered: caller has no NestNode
            DeviceAlreadyRegistered: (caller, device_id) already exists
            DeviceLimitReached: caller's index already holds the maximum
            InvalidField: caller not a str, a string too long or
                block_height not a uint
        """
        check_caller(caller)
        limits = self._limits
        check_bounded_str("device_id", device_id, limits.max_id_length)
        check_bounded_str("device_name", device_name, limits.max_name_length)
        check_bounded_str("device_type", device_type, limits.max_type_length)
        check_uint("block_height", block_height)

        device = Device(
            device_name=device_name,
            device_type=device_type,
            registration_time=block_height,
        )
        key = (caller, device_id)

        with self._lock:
            if caller not in self._nest_nodes:
                logger.debug(f"Rejected device {device_id!r}: {caller} has no NestNode")
                raise NestNodeNotRegistered(f"No NestNode registered for {caller}")
            if key in self._devices:
                logger.debug(f"Rejected device {device_id!r}: already registered for {caller}")
                raise DeviceAlreadyRegistered(f"Device {device_id!r} already registered for {caller}")

            index = self._owner_devices.get(caller, [])
            if len(index) >= limits.max_devices_per_owner:
                logger.debug(f"Rejected device {device_id!r}: {caller} index full")
                raise DeviceLimitReached(
                    f"{caller} already has {limits.max_devices_per_owner} devices"
                )

            self._devices.insert(key, device)
            self._owner_devices.setdefault(caller, []).append(device_id)

        logger.info(
            f"Registered device {device_id!r} ({device_type}) for {caller} "
            f"at block {block_height}"
        )
        return device

    def log_device_activity(
        self,
        caller: str,
        device_id: str,
        timestamp: int,
        action_hash: bytes,
        attestation_hash: bytes,
    ) -> ActivityLog:
        """
        Record an attestation for one device action.

        Hash content and timestamp ordering are not checked: logs may
        arrive out of order, and the same digests may appear at different
        timestamps. Only the exact (caller, device_id, timestamp) key must
        be new.

        Raises:
            NestNodeNotRegistered: caller has no NestNode
            DeviceNotRegistered: device_id is not registered for caller
            AttestationExists: a log already exists at this key
            InvalidField: malformed caller, device_id, timestamp or digest
        """
        check_caller(caller)
        limits = self._limits
        check_bounded_str("device_id", device_id, limits.max_id_length)
        check_uint("timestamp", timestamp)
        log = ActivityLog(
            action_hash=check_digest("action_hash", action_hash, limits.hash_length),
            attestation_hash=check_digest("attestation_hash", attestation_hash, limits.hash_length),
        )
        key = (caller, device_id, timestamp)

        with self._lock:
            if caller not in self._nest_nodes:
                logger.debug(f"Rejected activity for {device_id!r}: {caller} has no NestNode")
                raise NestNodeNotRegistered(f"No NestNode registered for {caller}")
            if (caller, device_id) not in self._devices:
                logger.debug(f"Rejected activity: device {device_id!r} unknown for {caller}")
                raise DeviceNotRegistered(f"Device {device_id!r} not registered for {caller}")
            if not self._activity_logs.insert(key, log):
                logger.debug(f"Rejected activity: {caller}/{device_id}@{timestamp} exists")
                raise AttestationExists(
                    f"Attestation already logged for {device_id!r} at {timestamp}"
                )

        logger.info(f"Logged activity for {caller}/{device_id} at {timestamp}")
        return log

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_nest_node_info(self, owner: str) -> Optional[NestNode]:
        if not isinstance(owner, str):
            return None
        with self._lock:
            return self._nest_nodes.get(owner)

    def get_device_info(self, owner: str, device_id: str) -> Optional[Device]:
        key = _device_key(owner, device_id)
        if key is None:
            return None
        with self._lock:
            return self._devices.get(key)

    def get_owner_devices(self, owner: str) -> List[str]:
        """Device ids in registration order; empty for unknown owners."""
        if not isinstance(owner, str):
            return []
        with self._lock:
            return list(self._owner_devices.get(owner, []))

    def get_activity_log(
        self,
        owner: str,
        device_id: str,
        timestamp: int,
    ) -> Optional[ActivityLog]:
        key = _log_key(owner, device_id, timestamp)
        if key is None:
            return None
        with self._lock:
            return self._activity_logs.get(key)

    def verify_activity_attestation(
        self,
        owner: str,
        device_id: str,
        timestamp: int,
        provided_hash: bytes,
    ) -> bool:
        """
        True iff a log exists at the key and its attestation hash equals
        provided_hash over all of its bytes.
        """
        log = self.get_activity_log(owner, device_id, timestamp)
        if log is None:
            return False
        if not isinstance(provided_hash, (bytes, bytearray, memoryview)):
            return False
        provided = bytes(provided_hash)
        if len(provided) != len(log.attestation_hash):
            return False
        return hmac.compare_digest(log.attestation_hash, provided)

    def was_device_active(self, owner: str, device_id: str, timestamp: int) -> bool:
        """True iff any log exists at the exact key, whatever its hashes."""
        return self.get_activity_log(owner, device_id, timestamp) is not None

    def get_storage_stats(self) -> Dict[str, int]:
        """Row counts per table."""
        with self._lock:
            return {
                "nest_nodes": len(self._nest_nodes),
                "devices": len(self._devices),
                "activity_logs": len(self._activity_logs),
                "owners_indexed": len(self._owner_devices),
            }

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Dump all four tables as JSON-compatible data."""
        with self._lock:
            return {
                "limits": self._limits.to_dict(),
                "nest_nodes": {
                    owner: node.to_dict() for owner, node in self._nest_nodes.items()
                },
                "devices": [
                    {"owner": owner, "device_id": device_id, **device.to_dict()}
                    for (owner, device_id), device in self._devices.items()
                ],
                "owner_devices": {
                    owner: list(ids) for owner, ids in self._owner_devices.items()
                },
                "activity_logs": [
                    {
                        "owner": owner,
                        "device_id": device_id,
                        "timestamp": timestamp,
                        **log.to_dict(),
                    }
                    for (owner, device_id, timestamp), log in self._activity_logs.items()
                ],
            }

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        limits: Optional[RegistryLimits] = None,
    ) -> "AttestationRegistry":
        """
        Rebuild a registry from to_dict() output.

        Field bounds and cross-table consistency are checked: every device
        needs its owner's NestNode, every log needs its device, and each
        owner's index must list exactly that owner's devices.

        Raises:
            SnapshotError: data is malformed or inconsistent
        """
        try:
            if limits is None:
                limits = RegistryLimits(**data.get("limits", {}))
            registry = cls(limits=limits)
            registry._restore(data)
        except SnapshotError:
            raise
        except (RegistryError, KeyError, TypeError, ValueError, AttributeError) as e:
            raise SnapshotError(f"Malformed registry data: {e}") from e
        return registry

    def _restore(self, data: Dict[str, Any]) -> None:
        limits = self._limits

        for owner, raw in data.get("nest_nodes", {}).items():
            node = NestNode.from_dict(raw)
            check_bounded_str("nest_node_id", node.nest_node_id, limits.max_id_length)
            check_uint("registration_time", node.registration_time)
            self._nest_nodes.insert(owner, node)

        for raw in data.get("devices", []):
            owner, device_id = raw["owner"], raw["device_id"]
            check_caller(owner)
            device = Device.from_dict(raw)
            check_bounded_str("device_id", device_id, limits.max_id_length)
            check_bounded_str("device_name", device.device_name, limits.max_name_length)
            check_bounded_str("device_type", device.device_type, limits.max_type_length)
            check_uint("registration_time", device.registration_time)
            if owner not in self._nest_nodes:
                raise SnapshotError(f"Device {device_id!r} has no NestNode for {owner}")
            if not self._devices.insert((owner, device_id), device):
                raise SnapshotError(f"Duplicate device {device_id!r} for {owner}")

        expected: Dict[str, set] = {}
        for (owner, device_id), _ in self._devices.items():
            expected.setdefault(owner, set()).add(device_id)

        index = {owner: list(ids) for owner, ids in data.get("owner_devices", {}).items()}
        for owner, ids in index.items():
            if len(ids) > limits.max_devices_per_owner:
                raise SnapshotError(f"Device index for {owner} exceeds capacity")
            if len(set(ids)) != len(ids) or set(ids) != expected.get(owner, set()):
                raise SnapshotError(f"Device index for {owner} does not match device table")
        missing = set(expected) - set(index)
        if missing:
            raise SnapshotError(f"Device index missing owners: {sorted(missing)}")
        self._owner_devices = {owner: ids for owner, ids in index.items() if ids}

        for raw in data.get("activity_logs", []):
            owner, device_id = raw["owner"], raw["device_id"]
            check_caller(owner)
            timestamp = check_uint("timestamp", raw["timestamp"])
            log = ActivityLog.from_dict(raw)
            check_digest("action_hash", log.action_hash, limits.hash_length)
            check_digest("attestation_hash", log.attestation_hash, limits.hash_length)
            if (owner, device_id) not in self._devices:
                raise SnapshotError(f"Activity log for unknown device {owner}/{device_id}")
            if not self._activity_logs.insert((owner, device_id, timestamp), log):
                raise SnapshotError(f"Duplicate activity log {owner}/{device_id}@{timestamp}")


def _device_key(owner: Any, device_id: Any) -> Optional[DeviceKey]:
    if isinstance(owner, str) and isinstance(device_id, str):
        return (owner, device_id)
    return None


def _log_key(owner: Any, device_id: Any, timestamp: Any) -> Optional[LogKey]:
    if isinstance(timestamp, bool) or not isinstance(timestamp, int):
        return None
    key = _device_key(owner, device_id)
    if key is None:
        return None
    return (key[0], key[1], timestamp)


# Module-level singleton
_registry: Optional[AttestationRegistry] = None
_registry_lock = threading.Lock()


def get_attestation_registry() -> AttestationRegistry:
    """Get the process-wide registry, creating it with empty tables on first use."""
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = AttestationRegistry()
        return _registry


def reset_attestation_registry():
    """Reset the registry (for testing)."""
    global _registry
    with _registry_lock:
        _registry = None
