"""Virtualization platform interfaces."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

VmHandle = Any


class Platform(Protocol):
    """Hypervisor operations used by the locator.

    Implementations raise ``PlatformError`` on any failure.
    """

    def list_all_vms(self) -> Sequence[VmHandle]:
        """Return every known VM, active and inactive."""

    def get_descriptor(self, handle: VmHandle) -> str: ...

    def get_name(self, handle: VmHandle) -> str: ...

    def get_uuid(self, handle: VmHandle) -> str: ...

    def lookup(self, uuid: str) -> VmHandle: ...

    def get_state(self, handle: VmHandle) -> int: ...

    def start(self, handle: VmHandle) -> None: ...

    def resume(self, handle: VmHandle) -> None: ...
