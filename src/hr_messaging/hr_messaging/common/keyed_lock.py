from __future__ import annotations

import threading
import zlib
from contextlib import contextmanager
from typing import Iterator


class StripedLock:
    """Fixed set of locks selected by key.

    Two callers using the same key always serialize; different keys usually
    do not. Memory stays bounded no matter how many rooms exist.
    """

    def __init__(self, stripes: int = 64):
        if stripes <= 0:
            raise ValueError("stripes must be positive")
        self._locks = tuple(threading.Lock() for _ in range(stripes))

    def _lock_for(self, key: str) -> threading.Lock:
        return self._locks[zlib.crc32(key.encode("utf-8")) % len(self._locks)]

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        lock = self._lock_for(key)
        with lock:
            yield
