"""
Scoped secret storage.

Secrets live in a mutable bytearray that is overwritten with zeros when the
scope ends. Immutable copies handed to third-party libraries are outside
this guarantee, so callers keep such copies short-lived.
"""

import threading
from typing import Union


class SecretBuffer:
    """Zero-on-release holder for key material"""

    def __init__(self, data: Union[bytes, bytearray, memoryview]):
        self._buffer = bytearray(data)
        self._lock = threading.Lock()
        self._wiped = False

    def __len__(self) -> int:
        return len(self._buffer)

    def __bool__(self) -> bool:
        return not self._wiped and len(self._buffer) > 0

    def __repr__(self) -> str:
        state = "wiped" if self._wiped else f"{len(self._buffer)} bytes"
        return f"SecretBuffer(<{state}>)"

    __str__ = __repr__

    def __enter__(self) -> 'SecretBuffer':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.wipe()
        return False

    @property
    def wiped(self) -> bool:
        return self._wiped

    def view(self) -> memoryview:
        """Read-only view of the secret; fails once wiped"""
        if self._wiped:
            raise ValueError("Secret buffer has been wiped")
        return memoryview(self._buffer).toreadonly()

    def copy(self) -> bytes:
        """Immutable copy for APIs that only accept bytes"""
        with self._lock:
            if self._wiped:
                raise ValueError("Secret buffer has been wiped")
            return bytes(self._buffer)

    def wipe(self) -> None:
        with self._lock:
            for i in range(len(self._buffer)):
                self._buffer[i] = 0
            self._wiped = True
