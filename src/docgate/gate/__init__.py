"""Rate-limiting execution gate.

This package provides the RateGate together with its building blocks:
a FIFO-fair counting semaphore and a fixed-rate refresh timer.
"""

from docgate.gate.rate_gate import RateGate
from docgate.gate.semaphore import CancelToken, FairSemaphore
from docgate.gate.timer import RefreshTimer

__all__ = [
    "RateGate",
    "CancelToken",
    "FairSemaphore",
    "RefreshTimer",
]
