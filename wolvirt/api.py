"""Stable public API for building tooling on top of wolvirt.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from wolvirt.core.errors import (
    DescriptorParseError,
    InterfaceMissingMacError,
    InvalidInterfaceMacError,
    MacAddressParseError,
    MacExtractionError,
    MacRepetitionError,
    PacketDecodeError,
    PacketTooShortError,
    PlatformConnectError,
    PlatformError,
    SyncStreamError,
    VmNotFoundError,
    WolvirtError,
)
from wolvirt.core.mac import format_mac, normalize_mac, parse_mac
from wolvirt.core.model import (
    DomainState,
    MacAddress,
    VmInfo,
    WakeAction,
    WakeOnLanPacket,
    WakeResult,
)
from wolvirt.core.service import WakeService
from wolvirt.platforms.base import Platform
from wolvirt.platforms.libvirt import LibvirtPlatform

__all__ = [
    "WolvirtError",
    "MacAddressParseError",
    "PacketDecodeError",
    "PacketTooShortError",
    "SyncStreamError",
    "MacRepetitionError",
    "MacExtractionError",
    "DescriptorParseError",
    "InterfaceMissingMacError",
    "InvalidInterfaceMacError",
    "PlatformError",
    "PlatformConnectError",
    "VmNotFoundError",
    "DomainState",
    "MacAddress",
    "VmInfo",
    "WakeAction",
    "WakeOnLanPacket",
    "WakeResult",
    "Platform",
    "LibvirtPlatform",
    "format_mac",
    "normalize_mac",
    "parse_mac",
    "Client",
]


class Client:
    """Public client for waking VMs through a virtualization platform.

    Without an explicit ``platform`` a `LibvirtPlatform` is connected to
    ``libvirt_uri`` on construction.
    """

    def __init__(
        self,
        *,
        platform: Platform | None = None,
        libvirt_uri: str = "qemu:///system",
    ) -> None:
        if platform is None:
            platform = LibvirtPlatform(libvirt_uri).connect()
        self._service = WakeService(platform)

    def decode(self, data: bytes) -> WakeOnLanPacket:
        return self._service.decode(data)

    def wake(self, mac: str) -> WakeResult:
        return self._service.wake(mac)

    def wake_from_packet(self, data: bytes) -> WakeResult:
        return self._service.wake(self._service.decode(data).target_mac_string())

    def list_vms(self) -> list[VmInfo]:
        return self._service.list_vms()
