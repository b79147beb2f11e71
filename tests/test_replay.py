"""
Tests for the startup replay scheduler.
"""
import socket
import threading

import pytest

from dnsautoroutes import replay as replay_module
from dnsautoroutes.exceptions import ResolutionError
from dnsautoroutes.replay import ReplayScheduler, resolve_host
from dnsautoroutes.store import LogEntry


class FakeResolver:
    def __init__(self, failing=()):
        self.calls = []
        self.failing = set(failing)
        self.done = threading.Event()

    def __call__(self, host, port):
        self.calls.append((host, port))
        if host in self.failing:
            raise ResolutionError(host, "Name or service not known")
        self.done.set()
        return [("resolved",)]


def entries(*hosts):
    return [LogEntry(host, 1_700_000_000) for host in hosts]


def test_no_entries_schedules_nothing():
    resolver = FakeResolver()
    scheduler = ReplayScheduler([], resolve=resolver, delay=0)

    assert scheduler.start() is None
    assert resolver.calls == []


def test_default_grace_period_is_one_second():
    scheduler = ReplayScheduler([])

    assert scheduler.delay == 1.0
    assert scheduler.port == 80


def test_single_recent_host_is_resolved_once():
    resolver = FakeResolver()
    scheduler = ReplayScheduler(entries("corp.example.com"), resolve=resolver, delay=0.01)

    timer = scheduler.start()
    assert timer.daemon
    scheduler.join(timeout=5)

    assert resolver.calls == [("corp.example.com", 80)]
    assert scheduler.resolved == ["corp.example.com"]


def test_start_does_not_block():
    resolver = FakeResolver()
    scheduler = ReplayScheduler(entries("corp.example.com"), resolve=resolver, delay=30)

    timer = scheduler.start()
    assert resolver.calls == []
    timer.cancel()


def test_failures_do_not_abort_remaining_hosts():
    resolver = FakeResolver(failing={"gone.corp.example.com"})
    scheduler = ReplayScheduler(
        entries("a.corp.example.com", "gone.corp.example.com", "b.corp.example.com"),
        resolve=resolver, delay=0, port=443,
    )

    assert scheduler.run() == ["a.corp.example.com", "b.corp.example.com"]
    assert [host for host, _ in resolver.calls] == [
        "a.corp.example.com", "gone.corp.example.com", "b.corp.example.com"
    ]
    assert all(port == 443 for _, port in resolver.calls)
    assert scheduler.failed == ["gone.corp.example.com"]


def test_os_errors_are_treated_as_failures():
    def resolve(host, port):
        raise OSError("network unreachable")

    scheduler = ReplayScheduler(entries("corp.example.com"), resolve=resolve, delay=0)
    assert scheduler.run() == []
    assert scheduler.failed == ["corp.example.com"]


def test_resolve_host_wraps_gaierror(monkeypatch):
    def fail(*args, **kwargs):
        raise socket.gaierror(socket.EAI_NONAME, "Name or service not known")

    monkeypatch.setattr(replay_module.socket, "getaddrinfo", fail)
    with pytest.raises(ResolutionError) as excinfo:
        resolve_host("missing.corp.example.com", 80)
    assert excinfo.value.host == "missing.corp.example.com"


def test_resolve_host_uses_given_port(monkeypatch):
    seen = []

    def getaddrinfo(host, port, *args):
        seen.append((host, port))
        return []

    monkeypatch.setattr(replay_module.socket, "getaddrinfo", getaddrinfo)
    resolve_host("corp.example.com", 80)
    assert seen == [("corp.example.com", 80)]
