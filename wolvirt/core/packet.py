"""Wake-on-LAN magic packet decoding.

A magic packet is a 6-byte sync stream of 0xFF followed by 16 repetitions of
the target MAC address, optionally followed by a SecureOn password. Trailing
bytes of any length are tolerated and kept as the password.
"""

from __future__ import annotations

from collections.abc import Iterator

from wolvirt.core.errors import MacRepetitionError, PacketTooShortError, SyncStreamError
from wolvirt.core.model import MAC_ADDR_LEN, MacAddress, WakeOnLanPacket

SYNC_STREAM = b"\xff" * 6
MAC_REPETITIONS = 16
WOL_PACKET_MIN_SIZE = len(SYNC_STREAM) + MAC_ADDR_LEN * MAC_REPETITIONS


def _chunks(data: bytes, size: int, start: int, count: int) -> Iterator[bytes]:
    for index in range(count):
        offset = start + index * size
        if offset + size > len(data):
            return
        yield data[offset:offset + size]


def decode_packet(data: bytes) -> WakeOnLanPacket:
    if len(data) < WOL_PACKET_MIN_SIZE:
        raise PacketTooShortError(len(data), WOL_PACKET_MIN_SIZE)

    if data[: len(SYNC_STREAM)] != SYNC_STREAM:
        raise SyncStreamError()

    start = len(SYNC_STREAM)
    first = data[start:start + MAC_ADDR_LEN]
    for index, chunk in enumerate(_chunks(data, MAC_ADDR_LEN, start, MAC_REPETITIONS)):
        if chunk != first:
            raise MacRepetitionError(index)

    trailer = data[WOL_PACKET_MIN_SIZE:]
    return WakeOnLanPacket(target=MacAddress(bytes(first)), password=bytes(trailer) or None)
