"""Libvirt platform implementation using libvirt-python."""

from __future__ import annotations

import logging
from typing import Any

from wolvirt.core.errors import PlatformConnectError, PlatformError

LOGGER = logging.getLogger(__name__)


class LibvirtPlatform:
    def __init__(self, uri: str = "qemu:///system") -> None:
        self.uri = uri
        self._libvirt: Any = None
        self._conn: Any = None

    def connect(self) -> LibvirtPlatform:
        try:
            import libvirt  # type: ignore
        except ImportError as exc:
            raise PlatformConnectError(
                "Libvirt platform requires 'libvirt-python'. Install dependency and retry."
            ) from exc

        LOGGER.info("Attempting to connect to libvirt URI: %s", self.uri)
        try:
            conn = libvirt.open(self.uri)
        except libvirt.libvirtError as exc:
            raise PlatformConnectError(f"Libvirt connection error for {self.uri}: {exc}") from exc
        if conn is None:
            raise PlatformConnectError(f"Libvirt connection error for {self.uri}")

        try:
            hostname = conn.getHostname()
        except libvirt.libvirtError:
            hostname = "N/A"
        LOGGER.info("Successfully connected to libvirt host: %s", hostname)

        self._libvirt = libvirt
        self._conn = conn
        return self

    def close(self) -> None:
        if self._conn is not None:
            try:
                self._conn.close()
            except self._libvirt.libvirtError as exc:
                LOGGER.warning("Failed to close libvirt connection: %s", exc)
            self._conn = None

    def __enter__(self) -> LibvirtPlatform:
        if self._conn is None:
            self.connect()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _call(self, what: str, func: Any, *args: Any) -> Any:
        if self._conn is None:
            raise PlatformError(f"Not connected to libvirt ({what})")
        try:
            return func(*args)
        except self._libvirt.libvirtError as exc:
            raise PlatformError(f"{what}: {exc}") from exc

    def list_all_vms(self) -> list[Any]:
        # flags=0 lists both active and inactive domains
        return self._call("listAllDomains", lambda: self._conn.listAllDomains(0))

    def get_descriptor(self, handle: Any) -> str:
        return self._call("XMLDesc", handle.XMLDesc, 0)

    def get_name(self, handle: Any) -> str:
        return self._call("name", handle.name)

    def get_uuid(self, handle: Any) -> str:
        return self._call("UUIDString", handle.UUIDString)

    def lookup(self, uuid: str) -> Any:
        return self._call("lookupByUUIDString", lambda: self._conn.lookupByUUIDString(uuid))

    def get_state(self, handle: Any) -> int:
        state, _reason = self._call("state", handle.state)
        return int(state)

    def start(self, handle: Any) -> None:
        self._call("create", handle.create)

    def resume(self, handle: Any) -> None:
        self._call("resume", handle.resume)
