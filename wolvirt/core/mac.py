"""MAC address parsing and canonical formatting."""

from __future__ import annotations

import re

from wolvirt.core.errors import MacAddressParseError
from wolvirt.core.model import MAC_ADDR_LEN, MacAddress

_OCTET_RE = re.compile(r"^[0-9a-fA-F]{2}$")


def format_mac(mac: MacAddress) -> str:
    return str(mac)


def parse_mac(text: str) -> MacAddress:
    """Parse a colon-separated MAC address such as ``52:54:00:12:34:56``.

    Hex digits are accepted in either case; each of the six parts must be
    exactly two characters.
    """
    parts = text.split(":")
    if len(parts) != MAC_ADDR_LEN:
        raise MacAddressParseError(
            "Invalid MAC address format: expected 6 parts separated by colons, "
            f"got {len(parts)}"
        )

    octets = bytearray()
    for part in parts:
        if len(part) != 2:
            raise MacAddressParseError(
                f"Invalid MAC address part '{part}': each part must be exactly 2 hex characters"
            )
        if not _OCTET_RE.match(part):
            raise MacAddressParseError(f"Invalid hex digit in MAC address part '{part}'")
        octets.append(int(part, 16))
    return MacAddress(bytes(octets))


def normalize_mac(text: str) -> str:
    return format_mac(parse_mac(text))
