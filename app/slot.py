import threading
from typing import Generic, TypeVar

T = TypeVar("T")


class Slot(Generic[T]):
    """
    Single-reference cell shared between one writer and many readers.

    The whole value is replaced at once; readers never take the lock and
    always see either the previous or the new instance.
    """

    def __init__(self, value: T | None = None) -> None:
        self._value = value
        self._lock = threading.Lock()

    def get(self) -> T | None:
        return self._value

    def set(self, value: T | None) -> T | None:
        """Install a new value and return the previous one."""
        with self._lock:
            previous = self._value
            self._value = value
        return previous
