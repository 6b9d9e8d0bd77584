# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Process-wide cache of loaded typefaces keyed by font identity."""

import logging
import threading
from collections.abc import Callable

from .typeface import Typeface, TypefaceKey

logger = logging.getLogger(__name__)


class TypefaceCache:
    """Caches typefaces so each font identity is parsed at most once.

    Concurrent requests for the same key wait for a single factory call;
    requests for different keys load in parallel.
    """

    def __init__(self) -> None:
        self._typefaces: dict[TypefaceKey, Typeface] = {}
        self._key_locks: dict[TypefaceKey, threading.Lock] = {}
        self._lock = threading.Lock()

    def get(self, key: TypefaceKey, factory: Callable[[], Typeface]) -> Typeface:
        """Returns the cached typeface for ``key``, loading it if needed.

        Args:
            key: Identity of the typeface.
            factory: Called without arguments to load the typeface on a
                cache miss. Exceptions propagate and nothing is cached.

        Returns:
            The cached or newly loaded Typeface.
        """
        with self._lock:
            typeface = self._typefaces.get(key)
            if typeface is not None:
                return typeface
            key_lock = self._key_locks.setdefault(key, threading.Lock())

        with key_lock:
            # Another thread may have finished loading while we waited
            with self._lock:
                typeface = self._typefaces.get(key)
            if typeface is not None:
                return typeface

            logger.debug("Loading typeface %s", key)
            try:
                typeface = factory()
                with self._lock:
                    self._typefaces[key] = typeface
            finally:
                with self._lock:
                    if self._key_locks.get(key) is key_lock:
                        del self._key_locks[key]
            return typeface

    def clear(self) -> None:
        with self._lock:
            self._typefaces.clear()
            self._key_locks.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._typefaces

    def __len__(self) -> int:
        with self._lock:
            return len(self._typefaces)


# Shared by callers that do not manage their own cache
default_cache = TypefaceCache()
