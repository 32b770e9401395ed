"""
Signal kinds understood by procman.

Only two fixed classes exist: the signals that terminate both the master and
its workers, and the signals that are simply forwarded to the workers.
"""
import enum
import signal
from typing import Iterable, Tuple, Union


class InvalidSignalKind(ValueError):
    """Raised when a signal outside the terminate/forward classes is requested."""


class SignalKind(enum.IntEnum):
    INT = signal.SIGINT
    TERM = signal.SIGTERM
    TTIN = signal.SIGTTIN
    USR1 = signal.SIGUSR1
    USR2 = signal.SIGUSR2
    HUP = signal.SIGHUP


# The signals that should terminate both the master and workers.
TERMINATE_SIGNALS: Tuple[SignalKind, ...] = (SignalKind.INT, SignalKind.TERM)

# The signals that should simply be forwarded to the workers.
FORWARD_SIGNALS: Tuple[SignalKind, ...] = (SignalKind.TTIN, SignalKind.USR1, SignalKind.USR2, SignalKind.HUP)

# Signal 0 checks that a process exists and can be signalled, without delivering anything.
PROBE_SIGNAL = 0

SignalLike = Union[SignalKind, int, str]


def to_signal_kind(value: SignalLike) -> SignalKind:
    """
    Normalises a SignalKind, a signal number or a name ('TERM', 'SIGTERM', 'term').

    :param value: The signal to convert.
    :return: The matching SignalKind.
    :raises InvalidSignalKind: If the value is not one of the supported signals.
    """
    if isinstance(value, SignalKind):
        return value
    if isinstance(value, str):
        name = value.strip().upper()
        if name.startswith("SIG"):
            name = name[3:]
        try:
            return SignalKind[name]
        except KeyError:
            raise InvalidSignalKind(f"Unsupported signal '{value}'. Expected one of: {_supported_names()}") from None
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return SignalKind(value)
        except ValueError:
            raise InvalidSignalKind(f"Unsupported signal number {value}. Expected one of: {_supported_names()}") from None
    raise InvalidSignalKind(f"Cannot interpret {value!r} as a signal.")


def to_signal_kinds(values: Iterable[SignalLike]) -> Tuple[SignalKind, ...]:
    """Converts every value, failing on the first unsupported one before anything is returned."""
    return tuple(to_signal_kind(value) for value in values)


def _supported_names() -> str:
    return ", ".join(kind.name for kind in SignalKind)
