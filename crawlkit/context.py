"""A small thread-safe store for passing values between callbacks."""

from __future__ import annotations

import threading
from typing import Any, Callable


class Context:
    """Key/value store shared by a request and its response."""

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}
        self._lock = threading.RLock()

    def put(self, key: str, value: Any) -> None:
        """Store a value of any type under ``key``."""
        with self._lock:
            self._values[key] = value

    def get(self, key: str) -> str:
        """Return the string stored under ``key``, or "" if there is none.

        Raises TypeError if the stored value is not a string.
        """
        with self._lock:
            if key not in self._values:
                return ""
            value = self._values[key]
        if not isinstance(value, str):
            raise TypeError(
                f"context value for {key!r} is {type(value).__name__}, not str"
            )
        return value

    def get_any(self, key: str) -> Any:
        """Return the value stored under ``key``, or None if there is none."""
        with self._lock:
            return self._values.get(key)

    def for_each(self, fn: Callable[[str, Any], Any]) -> list[Any]:
        """Call ``fn(key, value)`` for every entry and collect the results."""
        with self._lock:
            items = list(self._values.items())
        return [fn(key, value) for key, value in items]

    def __repr__(self) -> str:
        with self._lock:
            return f"Context({self._values!r})"