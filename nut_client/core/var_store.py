"""Store holding the last-fetched value of every UPS variable."""

import threading


class VarStore:
    """Maps variable name to its last value, as written by LIST VAR.

    Each entry is written under the lock on its own, so a reader running
    during a refresh may see some new values next to old ones. Keyed by
    name only: values from a previously listed UPS stay until cleared.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._values: dict[str, str] = {}

    def set(self, name: str, value: str) -> None:
        with self._lock:
            self._values[name] = value

    def get(self, name: str, default: str | None = None) -> str | None:
        with self._lock:
            return self._values.get(name, default)

    def snapshot(self) -> dict[str, str]:
        """Return a copy of all entries."""
        with self._lock:
            return dict(self._values)

    def clear(self) -> None:
        with self._lock:
            self._values.clear()

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._values

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)
