"""Shared fixtures: real child processes and a router that is always restored."""

import subprocess
import sys
import time
from typing import Callable, Iterator, List

import pytest

from procman.management import SignalRouter, process_alive

SLEEPER = [sys.executable, "-c", "import time; time.sleep(60)"]
QUICK_EXIT = [sys.executable, "-c", "pass"]


def wait_until(predicate: Callable[[], bool], timeout: float = 10.0) -> bool:
    """Poll ``predicate`` until it is true or the timeout expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.02)
    return predicate()


def wait_until_dead(pid: int, timeout: float = 10.0) -> bool:
    """Wait for a child to exit; it may still be an unreaped zombie afterwards."""
    return wait_until(lambda: not process_alive(pid), timeout)


@pytest.fixture
def spawn() -> Iterator[Callable[..., subprocess.Popen]]:
    """Start child processes and make sure none outlive the test."""
    children: List[subprocess.Popen] = []

    def _spawn(args: List[str] = SLEEPER) -> subprocess.Popen:
        proc = subprocess.Popen(args, stdin=subprocess.DEVNULL)
        children.append(proc)
        return proc

    yield _spawn

    for proc in children:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
        try:
            proc.wait(timeout=5)
        except ChildProcessError:
            pass


@pytest.fixture
def dead_pid(spawn: Callable[..., subprocess.Popen]) -> int:
    """A PID whose process has exited and been reaped."""
    proc = spawn(QUICK_EXIT)
    proc.wait(timeout=10)
    return proc.pid


@pytest.fixture
def router() -> Iterator[SignalRouter]:
    """A fresh SignalRouter whose trapped handlers are put back afterwards."""
    instance = SignalRouter()
    yield instance
    instance.stop(timeout=2)
    instance.restore()
