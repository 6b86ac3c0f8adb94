# -*- encoding: utf-8 -*-
"""
nestnode-attest - Tamper-evident attestations for NestNode home hubs.

A homeowner registers one hub (NestNode), registers devices under it, and
logs digests of device actions. The registry keeps only those digests, so
activity can later be proven without the raw data ever leaving the home.

Lifecycle per owner:
    unregistered -> NestNode registered -> devices registered -> activity logged

Nothing is ever updated, deleted or revoked.

Usage:
    from nestnode_attest import (
        AttestationRegistry,
        BlockCounter,
        DeviceNotRegistered,
    )
    from nestnode_attest.digests import action_digest, attestation_digest

    registry = AttestationRegistry()
    blocks = BlockCounter()

    registry.register_nest_node("alice", "home-1", block_height=blocks.advance())
    registry.register_device(
        "alice", "cam-1", "Front Camera", "security-camera",
        block_height=blocks.advance(),
    )

    h_action = action_digest({"event": "motion"})
    h_attest = attestation_digest("cam-1", 1000, h_action)
    registry.log_device_activity("alice", "cam-1", 1000, h_action, h_attest)

    assert registry.verify_activity_attestation("alice", "cam-1", 1000, h_attest)
"""

__version__ = "0.1.0"

from nestnode_attest.config import DEFAULT_LIMITS, RegistryLimits
from nestnode_attest.clock import BlockCounter
from nestnode_attest.errors import (
    ERROR_CODES,
    AlreadyRegistered,
    AttestationExists,
    DeviceAlreadyRegistered,
    DeviceLimitReached,
    DeviceNotRegistered,
    InvalidDeviceAction,
    InvalidField,
    NestNodeAlreadyRegistered,
    NestNodeNotRegistered,
    NotAuthorized,
    RegistryError,
    SnapshotError,
)
from nestnode_attest.records import ActivityLog, Device, NestNode
from nestnode_attest.registry import (
    AttestationRegistry,
    get_attestation_registry,
    reset_attestation_registry,
)
from nestnode_attest.snapshot import load_snapshot, save_snapshot

__all__ = [
    "__version__",
    # Registry
    "AttestationRegistry",
    "get_attestation_registry",
    "reset_attestation_registry",
    # Records
    "NestNode",
    "Device",
    "ActivityLog",
    # Config
    "RegistryLimits",
    "DEFAULT_LIMITS",
    "BlockCounter",
    # Snapshots
    "save_snapshot",
    "load_snapshot",
    # Errors
    "RegistryError",
    "NotAuthorized",
    "NestNodeAlreadyRegistered",
    "AlreadyRegistered",
    "NestNodeNotRegistered",
    "DeviceAlreadyRegistered",
    "DeviceNotRegistered",
    "InvalidDeviceAction",
    "AttestationExists",
    "DeviceLimitReached",
    "InvalidField",
    "SnapshotError",
    "ERROR_CODES",
]
