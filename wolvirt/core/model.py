"""Core data models used across decoder, locator, service, and CLI."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum

MAC_ADDR_LEN = 6


@dataclass(frozen=True)
class MacAddress:
    octets: bytes

    def __post_init__(self) -> None:
        if len(self.octets) != MAC_ADDR_LEN:
            raise ValueError(
                f"MAC address must be exactly {MAC_ADDR_LEN} octets, got {len(self.octets)}"
            )

    def __str__(self) -> str:
        return ":".join(f"{octet:02x}" for octet in self.octets)


@dataclass(frozen=True)
class WakeOnLanPacket:
    target: MacAddress
    password: bytes | None = None

    def target_mac_string(self) -> str:
        return str(self.target)


class DomainState(IntEnum):
    """Libvirt domain state codes."""

    NO_STATE = 0
    RUNNING = 1
    BLOCKED = 2
    PAUSED = 3
    SHUTDOWN = 4
    SHUTOFF = 5
    CRASHED = 6
    PM_SUSPENDED = 7
    LAST = 8

    @classmethod
    def from_code(cls, code: int) -> DomainState:
        try:
            return cls(code)
        except ValueError:
            return cls.NO_STATE


class WakeAction(Enum):
    STARTED = "started"
    RESUMED = "resumed"
    NONE = "none"


@dataclass(frozen=True)
class WakeResult:
    mac: str
    name: str
    uuid: str
    state: DomainState
    action: WakeAction


@dataclass(frozen=True)
class VmInfo:
    name: str
    uuid: str
    state: DomainState
    macs: tuple[str, ...]
