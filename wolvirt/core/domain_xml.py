"""MAC address extraction from libvirt domain XML."""

from __future__ import annotations

import xml.etree.ElementTree as ET

from wolvirt.core.errors import (
    DescriptorParseError,
    InterfaceMissingMacError,
    InvalidInterfaceMacError,
    MacAddressParseError,
)
from wolvirt.core.mac import normalize_mac


def get_mac_addresses(xml: str) -> list[str]:
    """Return the canonical MAC of every ``<devices>/<interface>`` in document order.

    The whole document fails on the first interface without a ``<mac address=...>``
    or with a malformed address; partial results are never returned.
    """
    try:
        root = ET.fromstring(xml)
    except ET.ParseError as exc:
        raise DescriptorParseError(f"Failed to parse domain XML: {exc}") from exc

    macs: list[str] = []
    for position, interface in enumerate(root.findall("./devices/interface")):
        mac_el = interface.find("mac")
        address = mac_el.get("address") if mac_el is not None else None
        if address is None:
            iface_type = interface.get("type", "unknown")
            raise InterfaceMissingMacError(
                f"Interface {position} (type '{iface_type}') has no <mac address=...> element"
            )
        try:
            macs.append(normalize_mac(address))
        except MacAddressParseError as exc:
            raise InvalidInterfaceMacError(f"Interface {position}: {exc}") from exc
    return macs
