# -*- coding: utf-8 -*-
# ------------------------------------------------------------------------------
#
#   Copyright 2023-2024 Valory AG
#
#   Licensed under the Apache License, Version 2.0 (the "License");
#   you may not use this file except in compliance with the License.
#   You may obtain a copy of the License at
#
#       http://www.apache.org/licenses/LICENSE-2.0
#
#   Unless required by applicable law or agreed to in writing, software
#   distributed under the License is distributed on an "AS IS" BASIS,
#   WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#   See the License for the specific language governing permissions and
#   limitations under the License.
#
# ------------------------------------------------------------------------------

"""This module contains the cache of slowly-changing on-chain parameters."""

import threading
from typing import Any, Callable, Dict, Tuple, TypeVar


UNDERLYING = "underlying"
RESERVE_COEFFICIENT = "reserve_coefficient"
STAKING_PHASE = "staking_phase"

T = TypeVar("T")


class ParameterCache:
    """
    Additive lookup-or-compute cache, one map per on-chain parameter.

    Entries are never evicted nor overwritten. Keys are addresses and are
    compared case-insensitively. Concurrent lookups of the same missing key
    wait for the first caller's computation instead of reading the chain
    again; the lock is only held to claim a key, never while computing it.
    A computation that raises stores nothing, so the key can be claimed again.
    """

    MAPS = (UNDERLYING, RESERVE_COEFFICIENT, STAKING_PHASE)

    def __init__(self) -> None:
        """Initialize an empty cache."""
        self._lock = threading.Lock()
        self._data: Dict[str, Dict[str, Any]] = {name: {} for name in self.MAPS}
        self._in_flight: Dict[Tuple[str, str], threading.Event] = {}
        self._hits = {name: 0 for name in self.MAPS}
        self._misses = {name: 0 for name in self.MAPS}

    def get_or_compute(self, name: str, key: str, compute: Callable[[], T]) -> T:
        """Return the cached value, computing and storing it on a miss."""
        entries = self._data[name]
        key = key.lower()

        while True:
            with self._lock:
                if key in entries:
                    self._hits[name] += 1
                    return entries[key]
                pending = self._in_flight.get((name, key))
                if pending is None:
                    pending = threading.Event()
                    self._in_flight[(name, key)] = pending
                    self._misses[name] += 1
                    break
            pending.wait()

        try:
            value = compute()
            with self._lock:
                entries[key] = value
        finally:
            with self._lock:
                del self._in_flight[(name, key)]
            pending.set()
        return value

    def get(self, name: str, key: str, default: Any = None) -> Any:
        """Get a cached value without computing it."""
        with self._lock:
            return self._data[name].get(key.lower(), default)

    def contains(self, name: str, key: str) -> bool:
        """Check whether a value is cached."""
        with self._lock:
            return key.lower() in self._data[name]

    def stats(self) -> Dict[str, Dict[str, int]]:
        """Get the number of entries, hits and misses of each map."""
        with self._lock:
            return {
                name: {
                    "entries": len(self._data[name]),
                    "hits": self._hits[name],
                    "misses": self._misses[name],
                }
                for name in self.MAPS
            }
