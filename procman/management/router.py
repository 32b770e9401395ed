import queue
import signal
import logging
import threading
from typing import Any, Callable, Dict, Iterable, Optional

from procman.management.signals import (
    FORWARD_SIGNALS,
    TERMINATE_SIGNALS,
    SignalKind,
    SignalLike,
    to_signal_kind,
    to_signal_kinds,
)

log = logging.getLogger(__name__)

SignalCallback = Callable[[SignalKind], Any]

DISPATCHER_THREAD_NAME = "SignalDispatcherThread"


class SignalRouter:
    """
    Traps OS signals and hands them to a callback outside the signal handler.

    The installed OS-level handler only records the signal on a queue. Callbacks
    run when `dispatch_pending` is called, either from the owner's main loop or
    from the dispatcher thread started with `start`. Each signal kind has at most
    one callback; registering again for a kind replaces the previous callback.

    Example:

        router = SignalRouter()
        router.register_terminate(lambda kind: shutdown_event.set())
        while running:
            router.dispatch_pending(timeout=1.0)
    """

    def __init__(self) -> None:
        self._callbacks: Dict[SignalKind, SignalCallback] = {}
        self._previous_handlers: Dict[SignalKind, Any] = {}
        self._lock = threading.Lock()
        self._events: "queue.SimpleQueue[SignalKind]" = queue.SimpleQueue()
        self._dispatcher: Optional[threading.Thread] = None
        self._stop_dispatcher = threading.Event()

    #* --- Registration ---
    def register_signals(self, signals: Iterable[SignalLike], callback: SignalCallback) -> None:
        """
        Traps the given signals and calls `callback(kind)` whenever one is received.

        Must be called from the main thread, as required by `signal.signal`.

        :param signals: The signals to trap.
        :param callback: Called with the SignalKind that was received.
        :raises InvalidSignalKind: If any signal is unsupported. Nothing is installed in that case.
        """
        kinds = to_signal_kinds(signals)
        if not callable(callback):
            raise TypeError(f"Signal callback must be callable, got {callback!r}")

        with self._lock:
            for kind in kinds:
                # signal.signal raises off the main thread; record nothing until it succeeds.
                previous = signal.signal(kind, self._handle_signal)
                self._previous_handlers.setdefault(kind, previous)
                if kind in self._callbacks:
                    log.debug(f"Replacing callback for SIG{kind.name}.")
                self._callbacks[kind] = callback
        log.debug(f"Trapped signals: {', '.join('SIG' + kind.name for kind in kinds)}")

    def register_terminate(self, callback: SignalCallback) -> None:
        self.register_signals(TERMINATE_SIGNALS, callback)

    def register_forward(self, callback: SignalCallback) -> None:
        self.register_signals(FORWARD_SIGNALS, callback)

    def callback_for(self, kind: SignalLike) -> Optional[SignalCallback]:
        """Returns the callback currently registered for a signal, if any."""
        kind = to_signal_kind(kind)
        with self._lock:
            return self._callbacks.get(kind)

    def restore(self) -> None:
        """Reinstalls the handlers that were active before this router trapped them."""
        with self._lock:
            for kind, handler in self._previous_handlers.items():
                signal.signal(kind, handler if handler is not None else signal.SIG_DFL)
            self._previous_handlers.clear()
            self._callbacks.clear()

    def _handle_signal(self, signum: int, frame) -> None:
        # Runs in signal context: record and return.
        self._events.put(SignalKind(signum))

    #* --- Dispatch ---
    def dispatch_pending(self, timeout: Optional[float] = None) -> int:
        """
        Runs the callbacks for every signal received so far.

        :param timeout: If given, wait up to this many seconds for the first signal.
        :return: The number of callbacks invoked.
        """
        try:
            if timeout is None:
                kind = self._events.get_nowait()
            else:
                kind = self._events.get(timeout=timeout)
        except queue.Empty:
            return 0

        dispatched = 0
        while True:
            if self._dispatch(kind):
                dispatched += 1
            try:
                kind = self._events.get_nowait()
            except queue.Empty:
                return dispatched

    def _dispatch(self, kind: SignalKind) -> bool:
        with self._lock:
            callback = self._callbacks.get(kind)
        if callback is None:
            log.debug(f"Received SIG{kind.name} with no registered callback. Ignoring.")
            return False

        log.debug(f"Dispatching SIG{kind.name}.")
        try:
            callback(kind)
        except Exception as e:
            log.error(f"Callback for SIG{kind.name} failed: {e}", exc_info=True)
        return True

    #* --- Background Dispatcher ---
    def start(self, poll_interval: float = 0.5) -> None:
        """Starts a daemon thread that dispatches signals as they arrive."""
        if self._dispatcher is not None and self._dispatcher.is_alive():
            if self._stop_dispatcher.is_set():
                log.warning("Signal dispatcher thread is still stopping. Not starting another.")
            return
        self._stop_dispatcher.clear()
        self._dispatcher = threading.Thread(
            target=self._dispatch_loop,
            args=(poll_interval,),
            daemon=True,
            name=DISPATCHER_THREAD_NAME,
        )
        self._dispatcher.start()

    def stop(self, timeout: Optional[float] = None) -> bool:
        """
        Stops the dispatcher thread started by `start`.

        :param timeout: Seconds to wait for the thread, or None to wait indefinitely.
        :return: True if no dispatcher thread is running any more.
        """
        self._stop_dispatcher.set()
        if self._dispatcher is None:
            return True
        self._dispatcher.join(timeout)
        if self._dispatcher.is_alive():
            log.warning("Signal dispatcher thread did not stop in time.")
            return False
        self._dispatcher = None
        return True

    def _dispatch_loop(self, poll_interval: float) -> None:
        log.debug("Signal dispatcher thread started.")
        while not self._stop_dispatcher.is_set():
            self.dispatch_pending(timeout=poll_interval)
        log.debug("Signal dispatcher thread has stopped.")
