import time
import logging
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from procman.config import effective_settings as config
from procman.management import (
    SignalKind,
    SignalRouter,
    WaitHandle,
    any_alive,
    pids_alive,
    remove_pid,
    signal_processes,
    wait_async,
    write_pid,
)

log = logging.getLogger(__name__)


class Supervisor:
    """
    Watches a fixed set of worker processes started elsewhere.

    Terminate signals received by the supervisor are passed on to every worker
    and end supervision; forward signals are only passed on. Workers that
    disappear are dropped from the tracked set and reaped in the background.
    """

    def __init__(
        self,
        worker_pids: Iterable[int],
        router: Optional[SignalRouter] = None,
        pid_file: Optional[Path] = None,
    ) -> None:
        self.workers: List[int] = list(dict.fromkeys(worker_pids))
        self.router = router or SignalRouter()
        self.pid_file = Path(pid_file) if pid_file else Path(config.PID_FILE_PATH)
        self.reapers: Dict[int, WaitHandle] = {}
        self.shutdown_signal_received = threading.Event()
        self.workers_lock = threading.Lock()

    #* --- Signal Callbacks ---
    def _on_terminate(self, kind: SignalKind) -> None:
        log.info(f"Received SIG{kind.name}. Terminating {len(self.workers)} worker(s).")
        signal_processes(self._snapshot(), kind)
        self.shutdown_signal_received.set()

    def _on_forward(self, kind: SignalKind) -> None:
        log.info(f"Forwarding SIG{kind.name} to {len(self.workers)} worker(s).")
        signal_processes(self._snapshot(), kind)

    def _snapshot(self) -> List[int]:
        with self.workers_lock:
            return list(self.workers)

    #* --- Lifecycle ---
    def install(self) -> None:
        """Traps the terminate and forward signals and writes the supervisor's PID file."""
        self.router.register_terminate(self._on_terminate)
        self.router.register_forward(self._on_forward)

        self.pid_file.parent.mkdir(parents=True, exist_ok=True)
        write_pid(self.pid_file)
        log.info(f"Supervisor PID file written to '{self.pid_file}'.")

    def check_workers(self) -> List[int]:
        """
        Drops workers that are no longer alive and starts a reaper for each.
        Reapers that finished since the previous check are forgotten.

        :return: The PIDs of the workers found dead during this check.
        """
        for pid, handle in list(self.reapers.items()):
            if handle.done():
                log.debug(f"Worker {pid} reaped (exit code {handle.exit_code}).")
                del self.reapers[pid]

        with self.workers_lock:
            alive = pids_alive(self.workers)
            dead = [pid for pid in self.workers if pid not in alive]
            self.workers = alive

        for pid in dead:
            log.warning(f"Detected stopped worker (PID: {pid}).")
            if pid not in self.reapers:
                self.reapers[pid] = wait_async(pid)
        return dead

    def run(self) -> None:
        """Main supervisor loop. Returns once shut down or when no workers remain."""
        log.info(f"Supervisor started. Monitoring {len(self.workers)} worker(s): {self.workers}")
        try:
            while not self.shutdown_signal_received.is_set():
                try:
                    self.router.dispatch_pending(timeout=config.SUPERVISOR_SLEEP_INTERVAL)
                    if self.shutdown_signal_received.is_set():
                        break

                    self.check_workers()
                    if not self.workers:
                        log.info("All workers have exited.")
                        break
                except KeyboardInterrupt:
                    log.info("Supervisor loop interrupted by user.")
                    self._on_terminate(SignalKind.INT)
        finally:
            self.wait_for_workers()
            remove_pid(self.pid_file)
            log.info("Supervisor stopped.")

    def wait_for_workers(self, timeout: Optional[float] = None) -> bool:
        """
        Waits for every tracked worker to go away.

        :param timeout: Seconds to wait; defaults to GRACEFUL_SHUTDOWN_TIMEOUT.
        :return: True if no worker is alive any more.
        """
        timeout = config.GRACEFUL_SHUTDOWN_TIMEOUT if timeout is None else timeout
        deadline = time.monotonic() + timeout
        while True:
            self.check_workers()
            if not any_alive(self._snapshot()):
                return True
            if time.monotonic() >= deadline:
                log.warning(f"{len(self.workers)} worker(s) still running after {timeout}s: {self.workers}")
                return False
            time.sleep(config.SHUTDOWN_POLL_INTERVAL)
