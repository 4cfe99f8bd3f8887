# services/dedupe.py

import threading
import time

from cachetools import TTLCache


class ExpiringKeyCache:
    """
    Кэш ключей с временем жизни в пределах одного процесса.

    remember(key) возвращает True, если ключ уже был запомнен и еще не истек.
    При горизонтальном масштабировании каждый процесс дедуплицирует только себя.
    """

    def __init__(self, ttl_seconds, maxsize=10000, timer=time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._cache = TTLCache(maxsize=maxsize, ttl=ttl_seconds, timer=timer)
        # TTLCache не потокобезопасен
        self._lock = threading.Lock()

    def remember(self, key):
        with self._lock:
            if key in self._cache:
                return True
            self._cache[key] = True
            return False

    def forget(self, key):
        with self._lock:
            self._cache.pop(key, None)

    def __len__(self):
        with self._lock:
            self._cache.expire()
            return len(self._cache)
