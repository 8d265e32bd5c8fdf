import json
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Tuple

import redis

from ..log import logger
from .exceptions import CacheUnavailableError


class CacheStore(ABC):
    """缓存存储接口，徽章缓存和权限缓存共用"""

    @abstractmethod
    def get(self, key: str) -> Any:
        """获取缓存值，未命中返回 None"""
        pass

    @abstractmethod
    def put(self, key: str, value: Any, ttl: int) -> None:
        """写入缓存，ttl 单位为秒"""
        pass

    @abstractmethod
    def forget(self, key: str) -> None:
        """删除缓存，不管是否过期"""
        pass


class InMemoryCacheStore(CacheStore):
    """进程内缓存"""

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._clock = clock or time.monotonic
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if expires_at <= self._clock():
                del self._entries[key]
                return None
            return value

    def put(self, key: str, value: Any, ttl: int) -> None:
        with self._lock:
            self._entries[key] = (self._clock() + ttl, value)

    def forget(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def flush(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        with self._lock:
            now = self._clock()
            return sum(1 for expires_at, _ in self._entries.values() if expires_at > now)


class RedisCacheStore(CacheStore):
    """Redis 缓存，多个进程共享同一份菜单缓存"""

    def __init__(self, client: "redis.Redis", prefix: str = "robyn_nav:"):
        self.client = client
        self.prefix = prefix

    @classmethod
    def from_url(cls, url: str, prefix: str = "robyn_nav:", **kwargs) -> "RedisCacheStore":
        client = redis.Redis.from_url(url, decode_responses=True, **kwargs)
        return cls(client, prefix=prefix)

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def get(self, key: str) -> Any:
        try:
            raw = self.client.get(self._key(key))
        except redis.exceptions.RedisError as e:
            raise CacheUnavailableError(f"redis get failed: {e}") from e
        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding undecodable cache entry %s", key)
            return None

    def put(self, key: str, value: Any, ttl: int) -> None:
        payload = json.dumps(value, default=str)
        try:
            self.client.set(self._key(key), payload, ex=max(int(ttl), 1))
        except redis.exceptions.RedisError as e:
            raise CacheUnavailableError(f"redis set failed: {e}") from e

    def forget(self, key: str) -> None:
        try:
            self.client.delete(self._key(key))
        except redis.exceptions.RedisError as e:
            raise CacheUnavailableError(f"redis delete failed: {e}") from e


def remember(store: Optional[CacheStore], key: str, ttl: Optional[int], thunk: Callable[[], Any]) -> Any:
    """带 TTL 的记忆化执行

    缓存值包装成 {"value": ...}，以便区分未命中和缓存的 None/False。
    缓存不可用时直接执行 thunk。
    """
    if store is None or ttl is None:
        return thunk()

    try:
        cached = store.get(key)
    except CacheUnavailableError as e:
        logger.warning("Menu cache unavailable, evaluating %s uncached: %s", key, e)
        return thunk()

    if isinstance(cached, dict) and "value" in cached:
        logger.debug("Menu cache hit: %s", key)
        return cached["value"]

    value = thunk()
    try:
        store.put(key, {"value": value}, ttl)
    except CacheUnavailableError as e:
        logger.warning("Menu cache unavailable, %s not stored: %s", key, e)
    return value


def forget(store: Optional[CacheStore], key: str) -> None:
    if store is None:
        return
    try:
        store.forget(key)
    except CacheUnavailableError as e:
        logger.warning("Menu cache unavailable, %s not cleared: %s", key, e)
