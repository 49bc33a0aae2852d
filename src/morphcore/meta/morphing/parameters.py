"""
MIT License

Copyright (c) 2025 Sébastien Gachoud

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in all
copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
SOFTWARE.

-------------------------------------------------------------------------------

Author: Sébastien Gachoud
Created: 2025-08-02
Description: Shared state of a morph engine: the reader/writer lock protecting the engine
            tables and the store of parsed transformer parameters.
🦙
"""

__author__ = "Sébastien Gachoud"
__license__ = "MIT"

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, NamedTuple


class ReadWriteLock:
    """Reader/writer lock. Many readers or a single writer. Not reentrant.

    A waiting writer keeps new readers out, so that writers are not starved by a steady
    flow of readers.
    """

    def __init__(self) -> None:
        self._condition = threading.Condition(threading.Lock())
        self._readers = 0
        self._writers_waiting = 0
        self._writing = False

    @contextmanager
    def read(self) -> Iterator[None]:
        """Hold the lock for reading."""
        with self._condition:
            while self._writing or self._writers_waiting:
                self._condition.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._condition:
                self._readers -= 1
                if not self._readers:
                    self._condition.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        """Hold the lock for writing."""
        with self._condition:
            self._writers_waiting += 1
            try:
                while self._writing or self._readers:
                    self._condition.wait()
            finally:
                self._writers_waiting -= 1
            self._writing = True
        try:
            yield
        finally:
            with self._condition:
                self._writing = False
                self._condition.notify_all()


class ParamsKey(NamedTuple):
    """Key of the parameters of one tag of one field of a shape."""

    shape: type
    field_index: int
    position: int

    def __str__(self) -> str:
        return f"{self.shape.__qualname__}.{self.field_index}.{self.position}"


class ParameterStore:
    """Parsed transformer parameters, keyed by ParamsKey.

    Entries are written once while a chain is compiled and only read afterwards.
    """

    def __init__(self, lock: ReadWriteLock | None = None) -> None:
        self._lock = lock or ReadWriteLock()
        self._values: dict[Any, Any] = {}

    def put(self, key: Any, value: Any) -> None:
        """Store the parameters for a key. Overwrites any previous value."""
        with self._lock.write():
            self._values[key] = value

    def get(self, key: Any, default: Any = None) -> Any:
        """Get the parameters for a key, or default if none were stored."""
        with self._lock.read():
            return self._values.get(key, default)

    def __contains__(self, key: Any) -> bool:
        with self._lock.read():
            return key in self._values

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._values)

    def clear(self) -> None:
        """Remove all the stored parameters."""
        with self._lock.write():
            self._values.clear()
