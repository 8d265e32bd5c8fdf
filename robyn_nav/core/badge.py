from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Optional, Union

from .cache import CacheStore, remember
from .exceptions import BadgeEvaluationError, ConfigurationError, MenuError
from .utils import call_with_request


class BadgeType(Enum):
    """徽章样式"""
    PRIMARY = 'primary'
    SECONDARY = 'secondary'
    SUCCESS = 'success'
    WARNING = 'warning'
    DANGER = 'danger'
    INFO = 'info'


BadgeTypeLike = Union[BadgeType, str, Callable[..., Any]]


def normalize_badge_type(badge_type: BadgeTypeLike) -> Union[str, Callable[..., Any]]:
    if callable(badge_type):
        return badge_type
    if isinstance(badge_type, BadgeType):
        return badge_type.value
    try:
        return BadgeType(badge_type).value
    except ValueError:
        raise ConfigurationError(
            f"Invalid badge type '{badge_type}', expected one of "
            f"{', '.join(t.value for t in BadgeType)}"
        ) from None


@dataclass(frozen=True)
class Badge:
    """菜单徽章

    value: 静态值或回调，回调接收请求上下文（可能为 None）
    type: 样式，也可以是返回样式的回调
    cache_ttl: 缓存秒数，None 表示不缓存
    condition: 可选的显示条件，返回 False 时徽章为空
    """
    value: Any
    type: Union[str, Callable[..., Any]] = BadgeType.PRIMARY.value
    cache_ttl: Optional[int] = None
    condition: Optional[Callable[..., Any]] = None

    def __post_init__(self):
        object.__setattr__(self, 'type', normalize_badge_type(self.type))

    @classmethod
    def make(cls, value: Any, badge_type: BadgeTypeLike = BadgeType.PRIMARY) -> "Badge":
        return cls(value=value, type=badge_type)

    def cache(self, ttl: int) -> "Badge":
        return replace(self, cache_ttl=ttl)

    def when(self, condition: Callable[..., Any]) -> "Badge":
        return replace(self, condition=condition)

    @property
    def is_dynamic(self) -> bool:
        return callable(self.value) or self.condition is not None

    def _evaluate(self, request: Any = None) -> Any:
        try:
            if self.condition is not None and not call_with_request(self.condition, request):
                return None
            if callable(self.value):
                return call_with_request(self.value, request)
            return self.value
        except MenuError:
            raise
        except Exception as e:
            raise BadgeEvaluationError(f"Badge callback failed: {e}") from e

    def resolve(
        self,
        request: Any = None,
        cache: Optional[CacheStore] = None,
        cache_key: Optional[str] = None,
    ) -> Any:
        """解析徽章值，设置了 cache_ttl 且提供缓存时按 cache_key 缓存"""
        if not self.is_dynamic:
            return self.value
        if self.cache_ttl is None or cache is None or cache_key is None:
            return self._evaluate(request)
        return remember(cache, cache_key, self.cache_ttl, lambda: self._evaluate(request))

    def resolve_type(self, request: Any = None) -> Optional[str]:
        if not callable(self.type):
            return self.type
        try:
            resolved = call_with_request(self.type, request)
        except Exception as e:
            raise BadgeEvaluationError(f"Badge type callback failed: {e}") from e
        if resolved is None:
            return None
        return normalize_badge_type(resolved)
