from dataclasses import dataclass, replace
from typing import Any, Callable, Optional

from .cache import CacheStore, remember
from .exceptions import AuthorizationEvaluationError, MenuError
from .utils import call_with_request


@dataclass(frozen=True)
class AuthorizationPredicate:
    """菜单可见性判断

    callback 接收请求上下文，没有请求时收到 None，需要自行判断。
    """
    callback: Callable[..., Any]
    cache_ttl: Optional[int] = None

    def cache(self, ttl: Optional[int]) -> "AuthorizationPredicate":
        return replace(self, cache_ttl=ttl)

    def _evaluate(self, request: Any = None) -> bool:
        try:
            return bool(call_with_request(self.callback, request))
        except MenuError:
            raise
        except Exception as e:
            raise AuthorizationEvaluationError(f"Authorization callback failed: {e}") from e

    def is_visible(
        self,
        request: Any = None,
        cache: Optional[CacheStore] = None,
        cache_key: Optional[str] = None,
    ) -> bool:
        if self.cache_ttl is None or cache is None or cache_key is None:
            return self._evaluate(request)
        return bool(remember(cache, cache_key, self.cache_ttl, lambda: self._evaluate(request)))
