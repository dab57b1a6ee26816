"""Capture provider interface."""

from typing import Protocol

from nutriscan.domain.capture import CapturedImage


class CaptureProvider(Protocol):
    """Interface for an exclusively owned still-image source."""

    def open(self) -> None:
        """Acquire the device. Raises DeviceAccessError."""

    def capture(self) -> CapturedImage:
        """Take one snapshot. Raises DeviceAccessError."""

    def switch_device(self) -> None:
        """Release the current device and acquire the next one."""

    def close(self) -> None:
        """Release the device; safe to call when not open."""
