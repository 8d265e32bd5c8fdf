from .authorization import AuthorizationPredicate
from .badge import Badge, BadgeType
from .cache import CacheStore, InMemoryCacheStore, RedisCacheStore, remember
from .context import RequestContext
from .dashboards import Dashboard, DashboardMenuBuilder
from .exceptions import (
    AuthorizationEvaluationError,
    BadgeEvaluationError,
    CacheUnavailableError,
    ConfigurationError,
    MenuError,
)
from .filters import MenuFilter
from .items import MenuItem
from .manager import MenuManager
from .menu import Menu, MenuGroup, MenuSection
from .options import MenuOptions
from .resolver import MenuResolver
from .site import MenuSite

__all__ = [
    'AuthorizationPredicate',
    'Badge',
    'BadgeType',
    'CacheStore',
    'InMemoryCacheStore',
    'RedisCacheStore',
    'remember',
    'RequestContext',
    'Dashboard',
    'DashboardMenuBuilder',
    'MenuError',
    'ConfigurationError',
    'AuthorizationEvaluationError',
    'BadgeEvaluationError',
    'CacheUnavailableError',
    'MenuFilter',
    'MenuItem',
    'MenuManager',
    'Menu',
    'MenuGroup',
    'MenuSection',
    'MenuOptions',
    'MenuResolver',
    'MenuSite',
]
