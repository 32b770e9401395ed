import os
import logging
import threading
from typing import Optional

log = logging.getLogger(__name__)

REAPER_THREAD_PREFIX = "Reaper"


class WaitHandle:
    """
    Tracks one in-flight wait on a process started by `wait_async`.

    The handle can be dropped (fire-and-forget) or kept to join later and read
    the exit code. `exit_code` is negative when the process died from a signal,
    and None when the process had already been reaped elsewhere.
    """

    def __init__(self, pid: int) -> None:
        self.pid = pid
        self.exit_code: Optional[int] = None
        self.already_reaped = False
        self._finished = threading.Event()
        self._thread = threading.Thread(
            target=self._wait,
            daemon=True,
            name=f"{REAPER_THREAD_PREFIX}-{pid}",
        )

    def _wait(self) -> None:
        try:
            if self.pid <= 0:
                # waitpid() treats these as "any child" or a process group.
                raise ChildProcessError(f"Refusing to wait on non-positive PID {self.pid}")
            _, status = os.waitpid(self.pid, 0)
            self.exit_code = os.waitstatus_to_exitcode(status)
            log.debug(f"Reaped process {self.pid} (exit code {self.exit_code}).")
        except ChildProcessError:
            # Already collected by another waiter, or not a child of this process.
            self.already_reaped = True
            log.debug(f"Process {self.pid} was already reaped.")
        finally:
            self._finished.set()

    def start(self) -> "WaitHandle":
        self._thread.start()
        return self

    def done(self) -> bool:
        """Returns True once the wait has been satisfied."""
        return self._finished.is_set()

    def join(self, timeout: Optional[float] = None) -> Optional[int]:
        """
        Blocks until the process has been reaped or the timeout expires.

        :param timeout: Seconds to wait, or None to wait indefinitely.
        :return: The exit code, or None if it is unknown or the wait has not finished.
        """
        self._finished.wait(timeout)
        return self.exit_code

    def __repr__(self) -> str:
        state = "done" if self.done() else "waiting"
        return f"<WaitHandle pid={self.pid} {state} exit_code={self.exit_code}>"


def wait_async(pid: int) -> WaitHandle:
    """
    Waits for the given process to complete using a separate thread.

    Start only one reaper per child; two waiters on the same PID race each other.

    :param pid: The child process to reap.
    :return: A started WaitHandle.
    """
    return WaitHandle(pid).start()
