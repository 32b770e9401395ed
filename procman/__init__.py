"""
procman: signal routing, liveness probing and reaping for supervised worker processes.
"""

from .supervisor import Supervisor

__all__ = ["Supervisor"]
