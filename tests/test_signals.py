"""Tests for the fixed signal classes and signal name parsing."""

import signal

import pytest

from procman.management.signals import (
    FORWARD_SIGNALS,
    TERMINATE_SIGNALS,
    InvalidSignalKind,
    SignalKind,
    to_signal_kind,
    to_signal_kinds,
)


class TestSignalClasses:
    """Verify the terminate and forward classes."""

    def test_terminate_signals(self) -> None:
        """INT and TERM terminate both the master and workers."""
        assert TERMINATE_SIGNALS == (SignalKind.INT, SignalKind.TERM)

    def test_forward_signals(self) -> None:
        """TTIN, USR1, USR2 and HUP are forwarded to workers."""
        assert set(FORWARD_SIGNALS) == {SignalKind.TTIN, SignalKind.USR1, SignalKind.USR2, SignalKind.HUP}

    def test_classes_are_disjoint_and_complete(self) -> None:
        """Every SignalKind belongs to exactly one class."""
        assert not set(TERMINATE_SIGNALS) & set(FORWARD_SIGNALS)
        assert set(TERMINATE_SIGNALS) | set(FORWARD_SIGNALS) == set(SignalKind)

    def test_values_match_platform(self) -> None:
        """Members carry the platform's signal numbers."""
        assert SignalKind.TERM == signal.SIGTERM
        assert SignalKind.HUP == signal.SIGHUP


class TestToSignalKind:
    """Verify conversion from names and numbers."""

    @pytest.mark.parametrize("value", ["TERM", "SIGTERM", "term", " sigterm ", signal.SIGTERM, SignalKind.TERM])
    def test_accepts_term_spellings(self, value) -> None:
        """Names with or without the SIG prefix, numbers and members all convert."""
        assert to_signal_kind(value) is SignalKind.TERM

    @pytest.mark.parametrize("value", ["KILL", "SIGSTOP", signal.SIGKILL, 0, True, None, 1.5])
    def test_rejects_unsupported(self, value) -> None:
        """Anything outside the two classes is rejected."""
        with pytest.raises(InvalidSignalKind):
            to_signal_kind(value)

    def test_invalid_kind_is_value_error(self) -> None:
        """Callers can catch the rejection as a ValueError."""
        with pytest.raises(ValueError, match="KILL"):
            to_signal_kind("KILL")

    def test_to_signal_kinds_fails_on_any_invalid(self) -> None:
        """A single unsupported entry fails the whole conversion."""
        assert to_signal_kinds(["INT", "HUP"]) == (SignalKind.INT, SignalKind.HUP)
        with pytest.raises(InvalidSignalKind):
            to_signal_kinds(["INT", "KILL"])
