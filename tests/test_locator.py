from __future__ import annotations

from dataclasses import dataclass

import pytest

from wolvirt.core.errors import (
    DescriptorParseError,
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
from wolvirt.core.locator import describe_vms, find_and_wake, start_vm
from wolvirt.core.model import DomainState, WakeAction


def _xml(*macs: str) -> str:
    ifaces = "".join(f"<interface type='network'><mac address='{m}'/></interface>" for m in macs)
    return f"<domain><devices>{ifaces}</devices></domain>"


@dataclass
class FakeVm:
    name: str
    uuid: str
    xml: str
    state: int = DomainState.SHUTOFF


class FakePlatform:
    def __init__(self, vms: list[FakeVm], *, fail: set[str] | None = None) -> None:
        self.vms = vms
        self.fail = fail or set()
        self.calls: list[tuple[str, str]] = []

    def _check(self, op: str) -> None:
        if op in self.fail:
            raise PlatformError(f"{op} failed")

    def list_all_vms(self) -> list[FakeVm]:
        self._check("list")
        return list(self.vms)

    def get_descriptor(self, handle: FakeVm) -> str:
        self.calls.append(("descriptor", handle.name))
        self._check("descriptor")
        return handle.xml

    def get_name(self, handle: FakeVm) -> str:
        self._check("name")
        return handle.name

    def get_uuid(self, handle: FakeVm) -> str:
        self._check("uuid")
        return handle.uuid

    def lookup(self, uuid: str) -> FakeVm:
        self._check("lookup")
        return next(vm for vm in self.vms if vm.uuid == uuid)

    def get_state(self, handle: FakeVm) -> int:
        self._check("state")
        return handle.state

    def start(self, handle: FakeVm) -> None:
        self.calls.append(("start", handle.name))
        self._check("start")

    def resume(self, handle: FakeVm) -> None:
        self.calls.append(("resume", handle.name))
        self._check("resume")

    def commands(self) -> list[tuple[str, str]]:
        return [c for c in self.calls if c[0] in {"start", "resume"}]


def _two_vms(state: int) -> list[FakeVm]:
    return [
        FakeVm("web", "uuid-1", _xml("52:54:00:00:00:01")),
        FakeVm("db", "uuid-2", _xml("52:54:00:00:00:02", "52:54:00:ab:cd:ef"), state=state),
    ]


def test_shutoff_vm_is_started_once() -> None:
    platform = FakePlatform(_two_vms(DomainState.SHUTOFF))
    result = find_and_wake(platform, "52:54:00:ab:cd:ef")
    assert platform.commands() == [("start", "db")]
    assert result.name == "db"
    assert result.uuid == "uuid-2"
    assert result.mac == "52:54:00:ab:cd:ef"
    assert result.state is DomainState.SHUTOFF
    assert result.action is WakeAction.STARTED


def test_paused_vm_is_resumed_never_started() -> None:
    platform = FakePlatform(_two_vms(DomainState.PAUSED))
    result = find_and_wake(platform, "52:54:00:ab:cd:ef")
    assert platform.commands() == [("resume", "db")]
    assert result.action is WakeAction.RESUMED


@pytest.mark.parametrize("state", [DomainState.SHUTDOWN, DomainState.CRASHED])
def test_shutdown_and_crashed_are_started(state: DomainState) -> None:
    platform = FakePlatform(_two_vms(state))
    find_and_wake(platform, "52:54:00:ab:cd:ef")
    assert platform.commands() == [("start", "db")]


@pytest.mark.parametrize(
    "state",
    [DomainState.RUNNING, DomainState.BLOCKED, DomainState.PM_SUSPENDED, DomainState.NO_STATE, DomainState.LAST, 42],
)
def test_other_states_are_successful_noops(state: int) -> None:
    platform = FakePlatform(_two_vms(state))
    result = find_and_wake(platform, "52:54:00:ab:cd:ef")
    assert platform.commands() == []
    assert result.action is WakeAction.NONE


def test_target_case_is_ignored() -> None:
    platform = FakePlatform(_two_vms(DomainState.SHUTOFF))
    find_and_wake(platform, "52:54:00:AB:CD:EF")
    assert platform.commands() == [("start", "db")]


def test_not_found_queries_each_descriptor_once() -> None:
    platform = FakePlatform(_two_vms(DomainState.SHUTOFF))
    with pytest.raises(VmNotFoundError) as exc:
        find_and_wake(platform, "52:54:00:FF:FF:FF")
    assert exc.value.mac == "52:54:00:FF:FF:FF"
    assert platform.calls == [("descriptor", "web"), ("descriptor", "db")]


def test_first_match_stops_enumeration() -> None:
    vms = [
        FakeVm("first", "uuid-1", _xml("52:54:00:12:34:56")),
        FakeVm("second", "uuid-2", _xml("52:54:00:12:34:56")),
    ]
    platform = FakePlatform(vms)
    find_and_wake(platform, "52:54:00:12:34:56")
    assert platform.calls == [("descriptor", "first"), ("start", "first")]


def test_bad_descriptor_aborts_search() -> None:
    vms = [
        FakeVm("broken", "uuid-1", "<domain><devices>"),
        FakeVm("target", "uuid-2", _xml("52:54:00:12:34:56")),
    ]
    platform = FakePlatform(vms)
    with pytest.raises(DescriptorParseError):
        find_and_wake(platform, "52:54:00:12:34:56")
    assert platform.commands() == []


@pytest.mark.parametrize(
    "op, error",
    [
        ("list", DomainListError),
        ("uuid", DomainUuidError),
        ("lookup", DomainLookupError),
        ("name", DomainNameError),
        ("descriptor", DomainXmlError),
        ("state", DomainStateError),
        ("start", DomainStartError),
    ],
)
def test_platform_failures_identify_step(op: str, error: type[PlatformError]) -> None:
    platform = FakePlatform(_two_vms(DomainState.SHUTOFF), fail={op})
    with pytest.raises(error):
        find_and_wake(platform, "52:54:00:ab:cd:ef")


def test_resume_failure_identifies_step() -> None:
    platform = FakePlatform(_two_vms(DomainState.PAUSED), fail={"resume"})
    with pytest.raises(DomainResumeError):
        find_and_wake(platform, "52:54:00:ab:cd:ef")


def test_describe_vms() -> None:
    platform = FakePlatform(_two_vms(DomainState.RUNNING))
    infos = describe_vms(platform)
    assert [i.name for i in infos] == ["web", "db"]
    assert infos[1].macs == ("52:54:00:00:00:02", "52:54:00:ab:cd:ef")
    assert infos[1].state is DomainState.RUNNING
    assert infos[0].state is DomainState.SHUTOFF


def test_unknown_state_code_maps_to_no_state() -> None:
    assert DomainState.from_code(99) is DomainState.NO_STATE
    assert DomainState.from_code(3) is DomainState.PAUSED


@pytest.mark.parametrize("op, error", [("name", DomainNameError), ("state", DomainStateError), ("uuid", DomainUuidError)])
def test_describe_vms_identifies_failing_step(op: str, error: type[PlatformError]) -> None:
    platform = FakePlatform(_two_vms(DomainState.RUNNING), fail={op})
    with pytest.raises(error):
        describe_vms(platform)


def test_platform_failure_is_chained() -> None:
    platform = FakePlatform(_two_vms(DomainState.SHUTOFF), fail={"lookup"})
    with pytest.raises(DomainLookupError) as exc:
        find_and_wake(platform, "52:54:00:ab:cd:ef")
    assert isinstance(exc.value.__cause__, PlatformError)
    assert platform.commands() == []


def test_start_vm_records_matched_mac() -> None:
    platform = FakePlatform(_two_vms(DomainState.PAUSED))
    result = start_vm(platform, "uuid-2", "52:54:00:ab:cd:ef")
    assert result.mac == "52:54:00:ab:cd:ef"
    assert result.action is WakeAction.RESUMED
