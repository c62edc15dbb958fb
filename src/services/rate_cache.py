from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

from domain.rates import RateSnapshot


class ReadWriteLock:
    """Many concurrent readers, one exclusive writer.

    Waiting writers block new readers so a steady stream of lookups cannot
    starve a store.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer_active = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer_active or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer_active or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer_active = True
        try:
            yield
        finally:
            with self._cond:
                self._writer_active = False
                self._cond.notify_all()


class RateCache:
    """In-memory map of base currency to the latest rate snapshot.

    Lookups return whatever is stored, expired or not; freshness is checked
    by the caller against its own clock.
    """

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._data: dict[str, RateSnapshot] = {}

    def lookup(self, base_currency: str) -> RateSnapshot | None:
        with self._lock.read():
            return self._data.get(base_currency.upper())

    def store(self, base_currency: str, snapshot: RateSnapshot) -> None:
        if not snapshot.rates:
            msg = "Refusing to cache a snapshot with an empty rate table"
            raise ValueError(msg)
        with self._lock.write():
            self._data[base_currency.upper()] = snapshot

    def clear(self) -> None:
        with self._lock.write():
            self._data.clear()

    def __contains__(self, base_currency: object) -> bool:
        if not isinstance(base_currency, str):
            return False
        with self._lock.read():
            return base_currency.upper() in self._data

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._data)


__all__ = ["RateCache", "ReadWriteLock"]
