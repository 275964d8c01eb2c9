"""Domain-specific errors for wolvirt."""


class WolvirtError(Exception):
    """Base error for wolvirt."""


class MacAddressParseError(WolvirtError):
    """Raised when a MAC address string is not in xx:xx:xx:xx:xx:xx form."""


class PacketDecodeError(WolvirtError):
    """Base error for invalid Wake-on-LAN magic packets."""


class PacketTooShortError(PacketDecodeError):
    def __init__(self, actual: int, required: int) -> None:
        super().__init__(
            f"Packet too short for WOL: {actual} bytes, expected at least {required}"
        )
        self.actual = actual
        self.required = required


class SyncStreamError(PacketDecodeError):
    def __init__(self) -> None:
        super().__init__("Packet does not start with 6 FF bytes (sync stream)")


class MacRepetitionError(PacketDecodeError):
    def __init__(self, index: int) -> None:
        super().__init__(f"MAC address repetition check failed at repetition {index}")
        self.index = index


class MacExtractionError(WolvirtError):
    """Base error for failures extracting MAC addresses from a domain XML."""


class DescriptorParseError(MacExtractionError):
    """Raised when a domain XML document is not well-formed."""


class InterfaceMissingMacError(MacExtractionError):
    """Raised when an interface element declares no MAC address."""


class InvalidInterfaceMacError(MacExtractionError):
    """Raised when an interface declares a malformed MAC address."""


class VmNotFoundError(WolvirtError):
    """Raised when no VM owns the requested MAC address."""

    def __init__(self, mac: str) -> None:
        super().__init__(f"No VM found with MAC address: {mac}")
        self.mac = mac


class PlatformError(WolvirtError):
    """Base error for virtualization platform failures."""


class PlatformConnectError(PlatformError):
    """Raised when connecting to the hypervisor fails."""


class DomainListError(PlatformError):
    """Raised when listing domains fails."""


class DomainXmlError(PlatformError):
    """Raised when fetching a domain XML description fails."""


class DomainUuidError(PlatformError):
    """Raised when reading a domain UUID fails."""


class DomainLookupError(PlatformError):
    """Raised when looking up a domain by UUID fails."""


class DomainNameError(PlatformError):
    """Raised when reading a domain name fails."""


class DomainStateError(PlatformError):
    """Raised when reading a domain state fails."""


class DomainStartError(PlatformError):
    """Raised when starting a domain fails."""


class DomainResumeError(PlatformError):
    """Raised when resuming a paused domain fails."""


class ListenerError(WolvirtError):
    """Base listener error."""


class AddressParseError(ListenerError):
    """Raised when a listen address is not host:port."""


class SocketBindError(ListenerError):
    """Raised when the UDP socket cannot be bound."""


class UdpReceiveError(ListenerError):
    """Raised when receiving a datagram fails."""


class ConfigLoadError(WolvirtError):
    """Raised when reading the configuration file fails."""


class ConfigValidationError(WolvirtError):
    """Raised when the configuration does not conform to schema."""
