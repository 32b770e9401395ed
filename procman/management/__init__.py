"""
The management package.
Signal routing, liveness probing and reaping for a known set of worker processes.

The supervising process traps signals with a SignalRouter, forwards them to its
workers with `signal_processes`, watches them with the liveness helpers and
reaps the ones that exit with `wait_async`.
"""
from .signals import (
    FORWARD_SIGNALS,
    PROBE_SIGNAL,
    TERMINATE_SIGNALS,
    InvalidSignalKind,
    SignalKind,
    to_signal_kind,
)
from .process_utils import (
    all_alive,
    any_alive,
    pids_alive,
    process_alive,
    process_status,
    send_signal,
    signal_processes,
)
from .reaper import WaitHandle, wait_async
from .router import SignalRouter
from .pidfile import read_pid, remove_pid, write_pid

__all__ = [
    "FORWARD_SIGNALS",
    "PROBE_SIGNAL",
    "TERMINATE_SIGNALS",
    "InvalidSignalKind",
    "SignalKind",
    "SignalRouter",
    "WaitHandle",
    "all_alive",
    "any_alive",
    "pids_alive",
    "process_alive",
    "process_status",
    "read_pid",
    "remove_pid",
    "send_signal",
    "signal_processes",
    "to_signal_kind",
    "wait_async",
    "write_pid",
]
