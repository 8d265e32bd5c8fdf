from dataclasses import dataclass, field
from typing import Any, Dict, Optional

NO_REQUEST_SCOPE = "no_request"
GUEST_SCOPE = "guest"


@dataclass
class RequestContext:
    """单次菜单解析的请求上下文

    user: 当前登录用户（由认证模块提供，可能为 None）
    query_params: 查询参数
    path: 当前请求路径
    """
    user: Any = None
    query_params: Dict[str, str] = field(default_factory=dict)
    path: str = "/"
    attributes: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def actor_key(self) -> str:
        """缓存区分键，同一用户的多次请求得到相同的值"""
        if self.user is None:
            return GUEST_SCOPE
        user_id = getattr(self.user, "id", None)
        if user_id is None:
            return GUEST_SCOPE
        return f"user_{user_id}"

    def get(self, key: str, default: Any = None) -> Any:
        if key in self.query_params:
            return self.query_params[key]
        return self.attributes.get(key, default)


def cache_scope(request: Optional[RequestContext]) -> str:
    """请求对应的缓存作用域，没有请求时使用独立的作用域"""
    if request is None:
        return NO_REQUEST_SCOPE
    actor_key = getattr(request, "actor_key", None)
    return actor_key or GUEST_SCOPE
