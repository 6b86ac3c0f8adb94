# -*- encoding: utf-8 -*-
"""
Attestation digests - off-chain side of the registry.

The registry stores and compares digests but never computes them. Hubs and
owners use these helpers to derive the two digests they submit with
log_device_activity():

- action_digest: Blake3-256 over the raw action payload
- attestation_digest: Blake3-256 binding device id, timestamp and action digest

Both serialize their input as canonical JSON (sorted keys, compact
separators) so any party holding the raw data can recompute them.

Usage:
    from nestnode_attest.digests import action_digest, attestation_digest

    action = {"event": "motion", "zone": "porch"}
    h_action = action_digest(action)
    h_attest = attestation_digest("cam-1", 1000, h_action)
    registry.log_device_activity("alice", "cam-1", 1000, h_action, h_attest)
"""

import json
from typing import Any, Mapping

from keri.core.coring import Diger, MtrDex

DIGEST_SIZE = 32


def canonical_json(content: Any) -> bytes:
    """Deterministic JSON encoding used for every digest input."""
    return json.dumps(content, sort_keys=True, separators=(",", ":")).encode()


def _blake3(ser: bytes) -> Diger:
    return Diger(ser=ser, code=MtrDex.Blake3_256)


def action_digest(action: Mapping[str, Any]) -> bytes:
    """32-byte digest of a raw device action payload."""
    return _blake3(canonical_json(dict(action))).raw


def attestation_digest(device_id: str, timestamp: int, action_hash: bytes) -> bytes:
    """32-byte digest binding a device, a timestamp and an action digest."""
    if len(action_hash) != DIGEST_SIZE:
        raise ValueError(f"action_hash must be {DIGEST_SIZE} bytes, got {len(action_hash)}")
    content = {
        "deviceId": device_id,
        "timestamp": timestamp,
        "actionHash": bytes(action_hash).hex(),
    }
    return _blake3(canonical_json(content)).raw


def digest_qb64(raw: bytes) -> str:
    """CESR qb64 text form of a raw Blake3-256 digest."""
    return Diger(raw=bytes(raw), code=MtrDex.Blake3_256).qb64


def verify_action(action: Mapping[str, Any], action_hash: bytes) -> bool:
    """True if action_hash is the digest of action."""
    return _blake3(canonical_json(dict(action))).raw == bytes(action_hash)
