import copy
import hashlib
from typing import Any, Callable, Dict, Optional, TypeVar

from .authorization import AuthorizationPredicate
from .badge import Badge, BadgeType, BadgeTypeLike
from .cache import CacheStore, forget
from .context import NO_REQUEST_SCOPE, cache_scope

NodeT = TypeVar('NodeT', bound='MenuNode')


class MenuNode:
    """菜单节点公共能力：图标、徽章、权限、元数据

    配置方法都返回新的节点，注册好的菜单树在多个请求间共享，不会被修改。
    """
    kind = 'node'

    def __init__(self, label: Optional[str] = None, icon: Optional[str] = None):
        self.label = label
        self.icon = icon
        self.badge: Optional[Badge] = None
        self.authorization: Optional[AuthorizationPredicate] = None
        self.auth_cache_ttl: Optional[int] = None
        self.badge_cache_ttl: Optional[int] = None
        self.meta: Dict[str, Any] = {}

    def _replace(self: NodeT, **changes) -> NodeT:
        clone = copy.copy(self)
        clone.__dict__.update(changes)
        return clone

    def when(self: NodeT, condition: Any, callback: Callable[[NodeT], NodeT]) -> NodeT:
        """condition 为真时应用 callback 的配置"""
        if condition:
            return callback(self)
        return self

    # 图标 / 元数据
    def with_icon(self: NodeT, icon: Optional[str]) -> NodeT:
        return self._replace(icon=icon)

    def with_meta(self: NodeT, key: str, value: Any) -> NodeT:
        return self._replace(meta={**self.meta, key: value})

    def merge_meta(self: NodeT, values: Dict[str, Any]) -> NodeT:
        return self._replace(meta={**self.meta, **values})

    # 徽章
    def with_badge(self: NodeT, badge: Any, badge_type: BadgeTypeLike = BadgeType.PRIMARY) -> NodeT:
        if not isinstance(badge, Badge):
            badge = Badge.make(badge, badge_type)
        return self._replace(badge=badge)

    def with_badge_if(self: NodeT, badge: Any, badge_type: BadgeTypeLike, condition: Callable[..., Any]) -> NodeT:
        """条件徽章，condition 在每次解析时执行"""
        if not isinstance(badge, Badge):
            badge = Badge.make(badge, badge_type)
        return self._replace(badge=badge.when(condition))

    def cache_badge(self: NodeT, ttl: int) -> NodeT:
        return self._replace(badge_cache_ttl=ttl)

    def effective_badge(self) -> Optional[Badge]:
        if self.badge is None:
            return None
        if self.badge.cache_ttl is None and self.badge_cache_ttl is not None:
            return self.badge.cache(self.badge_cache_ttl)
        return self.badge

    def resolve_badge(self, request: Any = None, cache: Optional[CacheStore] = None) -> Any:
        badge = self.effective_badge()
        if badge is None:
            return None
        return badge.resolve(request, cache=cache, cache_key=self.badge_cache_key(request))

    def resolve_badge_type(self, request: Any = None) -> Optional[str]:
        if self.badge is None:
            return None
        return self.badge.resolve_type(request)

    def clear_badge_cache(self: NodeT, cache: Optional[CacheStore], request: Any = None) -> NodeT:
        """删除徽章缓存（当前请求作用域和无请求作用域）"""
        forget(cache, self.badge_cache_key(request))
        forget(cache, self._cache_key('badge', NO_REQUEST_SCOPE))
        return self

    # 权限
    def can_see(self: NodeT, callback: Callable[..., Any]) -> NodeT:
        return self._replace(authorization=AuthorizationPredicate(callback, self.auth_cache_ttl))

    def cache_auth(self: NodeT, ttl: int) -> NodeT:
        authorization = self.authorization.cache(ttl) if self.authorization else None
        return self._replace(auth_cache_ttl=ttl, authorization=authorization)

    def is_visible(self, request: Any = None, cache: Optional[CacheStore] = None) -> bool:
        if self.authorization is None:
            return True
        return self.authorization.is_visible(request, cache=cache, cache_key=self.auth_cache_key(request))

    def clear_auth_cache(self: NodeT, cache: Optional[CacheStore], request: Any = None) -> NodeT:
        forget(cache, self.auth_cache_key(request))
        forget(cache, self._cache_key('auth', NO_REQUEST_SCOPE))
        return self

    # 缓存键
    def predicate_source(self) -> str:
        """权限回调的定义位置，参与缓存键

        同一行定义、闭包变量不同的回调得到相同的值。
        """
        if self.authorization is None:
            return ''
        callback = self.authorization.callback
        module = getattr(callback, '__module__', None) or type(callback).__module__
        name = getattr(callback, '__qualname__', None) or type(callback).__qualname__
        code = getattr(callback, '__code__', None)
        if code is not None:
            return f"{module}.{name}@{code.co_firstlineno}"
        return f"{module}.{name}"

    def identity_source(self) -> str:
        return f"{self.kind}:{self.label or ''}:{self.predicate_source()}"

    def identity(self) -> str:
        """节点的稳定标识，同样配置的节点在每次注册回调中得到相同的值"""
        return hashlib.md5(self.identity_source().encode('utf-8')).hexdigest()

    def _cache_key(self, namespace: str, scope: str) -> str:
        return f"menu_{self.kind}_{namespace}_{self.identity()}_{scope}"

    def auth_cache_key(self, request: Any = None) -> str:
        return self._cache_key('auth', cache_scope(request))

    def badge_cache_key(self, request: Any = None) -> str:
        return self._cache_key('badge', cache_scope(request))

    def to_dict(self, request: Any = None, cache: Optional[CacheStore] = None) -> Optional[Dict[str, Any]]:
        """按请求裁剪后序列化单个节点，节点被裁剪时返回 None"""
        from .resolver import MenuResolver
        tree = MenuResolver(cache=cache).resolve([self], request)
        return tree[0] if tree else None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.label!r}>"
