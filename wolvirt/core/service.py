"""Service layer used by the CLI, public API, and UDP serve loop."""

from __future__ import annotations

import logging

from wolvirt.core.errors import (
    MacExtractionError,
    PacketDecodeError,
    PlatformError,
    VmNotFoundError,
)
from wolvirt.core.locator import describe_vms, find_and_wake
from wolvirt.core.mac import parse_mac
from wolvirt.core.model import VmInfo, WakeOnLanPacket, WakeResult
from wolvirt.core.packet import decode_packet
from wolvirt.platforms.base import Platform
from wolvirt.transports.udp import UDPListener

LOGGER = logging.getLogger(__name__)


class WakeService:
    def __init__(self, platform: Platform) -> None:
        self.platform = platform

    def decode(self, data: bytes) -> WakeOnLanPacket:
        return decode_packet(data)

    def wake(self, mac: str) -> WakeResult:
        parse_mac(mac)
        return find_and_wake(self.platform, mac)

    def list_vms(self) -> list[VmInfo]:
        return describe_vms(self.platform)

    def handle_packet(self, data: bytes) -> WakeResult | None:
        """Decode one datagram and wake its target.

        Per-packet failures are logged and reported as ``None`` so the
        caller can keep serving.
        """
        try:
            packet = decode_packet(data)
        except PacketDecodeError as exc:
            LOGGER.warning("Received invalid WOL packet: %s", exc)
            return None

        mac = packet.target_mac_string()
        LOGGER.info("Received valid WOL packet for MAC: %s", mac)
        try:
            result = find_and_wake(self.platform, mac)
        except VmNotFoundError as exc:
            LOGGER.info("%s", exc)
            return None
        except (MacExtractionError, PlatformError) as exc:
            LOGGER.warning("Failed to start VM for MAC %s: %s", mac, exc)
            return None

        LOGGER.info("Handled WOL packet for MAC %s: %s (%s)", mac, result.name, result.action.value)
        return result


def serve(service: WakeService, listener: UDPListener) -> None:
    """Process datagrams until a receive error occurs."""
    host, port = listener.bound_address
    LOGGER.info("Listening for WOL packets on %s:%s", host, port)
    while True:
        data, src = listener.receive()
        LOGGER.debug("Received %d bytes from %s:%s", len(data), src[0], src[1])
        service.handle_packet(data)
