# -*- encoding: utf-8 -*-
"""
Registry errors.

Every rejected operation raises a distinct RegistryError subclass carrying a
stable integer code, so callers can tell outcomes apart without parsing
messages. All of them are raised before any table is touched.
"""

from typing import Optional


class RegistryError(Exception):
    """Base class for attestation registry failures."""

    code: int = 0

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or type(self).__name__)


class NotAuthorized(RegistryError):
    """Reserved. No exposed operation raises this today."""
    code = 100


class NestNodeAlreadyRegistered(RegistryError):
    code = 101


# Short name used by callers that only deal with hub registration
AlreadyRegistered = NestNodeAlreadyRegistered


class NestNodeNotRegistered(RegistryError):
    code = 102


class DeviceAlreadyRegistered(RegistryError):
    code = 103


class DeviceNotRegistered(RegistryError):
    code = 104


class InvalidDeviceAction(RegistryError):
    """Reserved. No exposed operation raises this today."""
    code = 105


class AttestationExists(RegistryError):
    code = 106


class DeviceLimitReached(RegistryError):
    """Owner's device index is at capacity."""
    code = 107


class InvalidField(RegistryError, ValueError):
    """
    Input has the wrong shape: over-length string, wrong-size digest,
    negative or non-integer counter.
    """
    code = 108

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")


class SnapshotError(RegistryError):
    """Snapshot file is unreadable or internally inconsistent."""
    code = 109


ERROR_CODES = {
    cls.code: cls
    for cls in (
        NotAuthorized,
        NestNodeAlreadyRegistered,
        NestNodeNotRegistered,
        DeviceAlreadyRegistered,
        DeviceNotRegistered,
        InvalidDeviceAction,
        AttestationExists,
        DeviceLimitReached,
        InvalidField,
        SnapshotError,
    )
}
