import asyncio
import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from letteravatar.domain.repositories import AvatarCache

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    value: bytes
    expires_at: float | None


@dataclass
class _KeyLock:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0


class MemoryAvatarCache(AvatarCache):
    """
    Потокобезопасный in-memory кеш готовых изображений.

    LRU-вытеснение по количеству записей и истечение по TTL (0 - без ограничения).
    get_or_compute гарантирует не более одного одновременного рендера на ключ.
    """

    def __init__(
        self,
        max_entries: int = 0,
        ttl_seconds: float = 0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[str, _Entry] = OrderedDict()
        self._lock = threading.Lock()
        # Только из event loop
        self._key_locks: dict[str, _KeyLock] = {}
        self.hits = 0
        self.misses = 0
        self.renders = 0
        self.evictions = 0

    def get(self, key: str) -> bytes | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expires_at is not None and entry.expires_at <= self._clock():
                del self._entries[key]
                self.evictions += 1
                logger.debug(f"Запись кеша {key} истекла")
                return None
            self._entries.move_to_end(key)
            return entry.value

    def set(self, key: str, value: bytes) -> None:
        expires_at = self._clock() + self.ttl_seconds if self.ttl_seconds else None
        with self._lock:
            self._entries[key] = _Entry(value=bytes(value), expires_at=expires_at)
            self._entries.move_to_end(key)
            while self.max_entries and len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                self.evictions += 1
                logger.debug(f"Запись кеша {evicted} вытеснена (LRU)")

    async def get_or_compute(self, key: str, produce: Callable[[], Awaitable[bytes]]) -> bytes:
        cached = self.get(key)
        if cached is not None:
            self.hits += 1
            return cached

        key_lock = self._key_locks.get(key)
        if key_lock is None:
            key_lock = self._key_locks[key] = _KeyLock()
        key_lock.users += 1
        try:
            async with key_lock.lock:
                # Двойная проверка: ключ мог заполнить параллельный запрос
                cached = self.get(key)
                if cached is not None:
                    self.hits += 1
                    return cached
                self.misses += 1
                value = await produce()
                self.renders += 1
                self.set(key, value)
                return value
        finally:
            key_lock.users -= 1
            if key_lock.users == 0:
                self._key_locks.pop(key, None)

    def stats(self) -> dict[str, Any]:
        with self._lock:
            entries = len(self._entries)
        return {
            "entries": entries,
            "max_entries": self.max_entries,
            "ttl_seconds": self.ttl_seconds,
            "hits": self.hits,
            "misses": self.misses,
            "renders": self.renders,
            "evictions": self.evictions,
        }

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        logger.info("Кеш аватаров очищен")

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
