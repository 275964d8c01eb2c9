"""Locate the VM owning a MAC address and drive it toward running."""

from __future__ import annotations

import logging

from wolvirt.core.domain_xml import get_mac_addresses
from wolvirt.core.errors import (
    DomainListError,
    DomainLookupError,
    DomainNameError,
    DomainResumeError,
    DomainStartError,
    DomainStateError,
    DomainUuidError,
    DomainXmlError,
    PlatformError,
    VmNotFoundError,
)
from wolvirt.core.model import DomainState, VmInfo, WakeAction, WakeResult
from wolvirt.platforms.base import Platform, VmHandle

LOGGER = logging.getLogger(__name__)

_STARTABLE = frozenset({DomainState.SHUTOFF, DomainState.SHUTDOWN, DomainState.CRASHED})


def _list_vms(platform: Platform) -> list[VmHandle]:
    try:
        return list(platform.list_all_vms())
    except PlatformError as exc:
        LOGGER.error("Failed to list all domains: %s", exc)
        raise DomainListError(f"Failed to list domains: {exc}") from exc


def _descriptor(platform: Platform, handle: VmHandle) -> str:
    try:
        return platform.get_descriptor(handle)
    except PlatformError as exc:
        try:
            name = platform.get_name(handle)
        except PlatformError:
            name = "unknown"
        LOGGER.error("Failed to get XML description for domain %s: %s", name, exc)
        raise DomainXmlError(f"Failed to get domain XML for {name}: {exc}") from exc


def start_vm(platform: Platform, uuid: str, mac: str) -> WakeResult:
    """Start, resume, or leave alone the VM identified by ``uuid`` based on its state."""
    try:
        handle = platform.lookup(uuid)
    except PlatformError as exc:
        LOGGER.error("Failed to lookup VM with UUID %s: %s", uuid, exc)
        raise DomainLookupError(f"Failed to lookup domain {uuid}: {exc}") from exc

    try:
        name = platform.get_name(handle)
    except PlatformError as exc:
        LOGGER.error("Failed to get name for VM with UUID %s: %s", uuid, exc)
        raise DomainNameError(f"Failed to get domain name for {uuid}: {exc}") from exc
    LOGGER.info("Attempting to start VM via libvirt: %s %s", name, uuid)

    try:
        state = DomainState.from_code(platform.get_state(handle))
    except PlatformError as exc:
        LOGGER.error("Failed to get state for VM %s: %s", name, exc)
        raise DomainStateError(f"Failed to get domain state for {name}: {exc}") from exc

    if state in _STARTABLE:
        try:
            platform.start(handle)
        except PlatformError as exc:
            LOGGER.error("Failed to start VM %s: %s", name, exc)
            raise DomainStartError(f"Failed to start domain {name}: {exc}") from exc
        LOGGER.info("Successfully commanded VM %s to start.", name)
        action = WakeAction.STARTED
    elif state is DomainState.PAUSED:
        try:
            platform.resume(handle)
        except PlatformError as exc:
            LOGGER.error("Failed to resume VM %s: %s", name, exc)
            raise DomainResumeError(f"Failed to resume domain {name}: {exc}") from exc
        LOGGER.info("Successfully commanded VM %s to resume (it was paused).", name)
        action = WakeAction.RESUMED
    else:
        LOGGER.info(
            "VM %s is not in a startable state (current: %s). No action taken.",
            name,
            state.name,
        )
        action = WakeAction.NONE

    return WakeResult(mac=mac, name=name, uuid=uuid, state=state, action=action)


def find_and_wake(platform: Platform, target_mac: str) -> WakeResult:
    """Find the VM with an interface matching ``target_mac`` and wake it.

    Every VM is checked in enumeration order; a descriptor that cannot be
    fetched or parsed aborts the search. Raises ``VmNotFoundError`` when no
    interface matches.
    """
    LOGGER.info("Searching for VM with MAC address: %s", target_mac)
    target_lower = target_mac.lower()

    for handle in _list_vms(platform):
        for mac in get_mac_addresses(_descriptor(platform, handle)):
            LOGGER.debug("Checking MAC address: %s", mac)
            if mac.lower() != target_lower:
                continue
            try:
                uuid = platform.get_uuid(handle)
            except PlatformError as exc:
                LOGGER.error(
                    "Failed to get UUID for domain with matching MAC %s: %s", target_mac, exc
                )
                raise DomainUuidError(f"Failed to get domain UUID: {exc}") from exc
            LOGGER.info("Found VM with matching MAC address: %s (%s)", target_mac, uuid)
            return start_vm(platform, uuid, mac)

    LOGGER.info("No VM found with MAC address: %s", target_mac)
    raise VmNotFoundError(target_mac)


def describe_vms(platform: Platform) -> list[VmInfo]:
    infos: list[VmInfo] = []
    for handle in _list_vms(platform):
        macs = tuple(get_mac_addresses(_descriptor(platform, handle)))
        try:
            name = platform.get_name(handle)
        except PlatformError as exc:
            raise DomainNameError(f"Failed to get domain name: {exc}") from exc
        try:
            uuid = platform.get_uuid(handle)
        except PlatformError as exc:
            raise DomainUuidError(f"Failed to get domain UUID for {name}: {exc}") from exc
        try:
            state = DomainState.from_code(platform.get_state(handle))
        except PlatformError as exc:
            raise DomainStateError(f"Failed to get domain state for {name}: {exc}") from exc
        infos.append(VmInfo(name=name, uuid=uuid, state=state, macs=macs))
    return infos
