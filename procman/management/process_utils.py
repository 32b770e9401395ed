import os
import psutil
import logging
from typing import Iterable, List, Union

from procman.management.signals import PROBE_SIGNAL, SignalLike, to_signal_kind

log = logging.getLogger(__name__)


#* --- Signal Delivery ---
def _resolve_signal(signal: Union[SignalLike, int]) -> int:
    """Validates a signal for delivery. The probe signal is allowed through as-is."""
    if type(signal) is int and signal == PROBE_SIGNAL:
        return PROBE_SIGNAL
    return int(to_signal_kind(signal))


def _deliver(pid: int, signum: int) -> bool:
    if pid <= 0:
        # 0 and negative values address process groups, never a single worker.
        log.warning(f"Refusing to signal non-positive PID {pid}.")
        return False
    try:
        os.kill(pid, signum)
        return True
    except ProcessLookupError:
        return False


def send_signal(pid: int, signal: Union[SignalLike, int]) -> bool:
    """
    Sends a signal to a single process.

    :param pid: The process to signal.
    :param signal: A SignalKind (or its name/number), or PROBE_SIGNAL.
    :return: True if the signal was delivered, False if the process no longer exists.
    :raises InvalidSignalKind: If the signal is not supported.
    """
    return _deliver(pid, _resolve_signal(signal))


def signal_processes(pids: Iterable[int], signal: Union[SignalLike, int]) -> None:
    """Sends the signal to every process, ignoring those that have already gone away."""
    signum = _resolve_signal(signal)
    for pid in pids:
        if not _deliver(pid, signum):
            log.debug(f"Process {pid} no longer exists, skipping signal {signum}.")


#* --- Process Status & Monitoring ---
def _is_zombie(pid: int) -> bool:
    try:
        return psutil.Process(pid).status() == psutil.STATUS_ZOMBIE
    except psutil.NoSuchProcess:
        return True
    except psutil.Error:
        return False


def process_alive(pid: int) -> bool:
    """
    Returns True if the process exists and can be signalled.

    An exited child that has not been reaped yet is reported as dead. The answer
    only reflects the moment of the call.
    """
    if not send_signal(pid, PROBE_SIGNAL):
        return False
    return not _is_zombie(pid)


def all_alive(pids: Iterable[int]) -> bool:
    """Returns True if all the processes are alive."""
    for pid in pids:
        if not process_alive(pid):
            return False
    return True


def any_alive(pids: Iterable[int]) -> bool:
    return any(process_alive(pid) for pid in pids)


def pids_alive(pids: Iterable[int]) -> List[int]:
    """Returns the live processes, in the order they were given."""
    return [pid for pid in pids if process_alive(pid)]


def process_status(pid: int) -> str:
    """Gets a string representation of a process status."""
    if pid <= 0:
        return "unknown"
    try:
        if psutil.Process(pid).status() == psutil.STATUS_ZOMBIE:
            return "zombie"
        return "running"
    except psutil.ZombieProcess:
        return "zombie"
    except psutil.NoSuchProcess:
        return "stopped"
    except psutil.Error:
        return "unknown"
