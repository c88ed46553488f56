"""Simulated transaction chain of wallet and server workers joined by bounded, semaphore-guarded buffers."""

__version__ = "0.1.0"