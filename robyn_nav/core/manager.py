from typing import Any, Callable, Dict, List, Optional

from ..log import logger
from .cache import CacheStore
from .exceptions import ConfigurationError
from .menu import Menu
from .nodes import MenuNode
from .options import DEFAULT_OPTIONS, MenuOptions
from .resolver import MenuResolver
from .utils import call_with_request

MainMenuCallback = Callable[..., Any]
UserMenuCallback = Callable[[Any, Menu], Optional[Menu]]


class MenuManager:
    """菜单管理器

    注册主菜单和用户菜单回调，每次解析都会重新调用回调生成菜单树。
    """

    def __init__(self, cache: Optional[CacheStore] = None, options: Optional[MenuOptions] = None):
        self.options = options or DEFAULT_OPTIONS
        self.resolver = MenuResolver(cache=cache, options=self.options)
        self._main_menu: Optional[MainMenuCallback] = None
        self._user_menu: Optional[UserMenuCallback] = None

    @property
    def cache(self) -> Optional[CacheStore]:
        return self.resolver.cache

    def main_menu(self, callback: MainMenuCallback) -> MainMenuCallback:
        """注册主菜单回调，也可以当装饰器使用"""
        self._main_menu = callback
        return callback

    def user_menu(self, callback: UserMenuCallback) -> UserMenuCallback:
        """注册用户菜单回调 (request, menu) -> menu"""
        self._user_menu = callback
        return callback

    def has_custom_main_menu(self) -> bool:
        return self._main_menu is not None

    def has_custom_user_menu(self) -> bool:
        return self._user_menu is not None

    def clear_main_menu(self) -> None:
        self._main_menu = None

    def clear_user_menu(self) -> None:
        self._user_menu = None

    def resolve_main_menu(self, request: Any = None) -> List[MenuNode]:
        """调用注册回调，返回未裁剪的菜单节点"""
        if self._main_menu is None:
            return []
        nodes = call_with_request(self._main_menu, request)
        if nodes is None:
            return []
        if isinstance(nodes, MenuNode):
            nodes = [nodes]
        nodes = list(nodes)
        for node in nodes:
            if not isinstance(node, MenuNode):
                raise ConfigurationError(
                    f"Main menu callback must return menu nodes, got {type(node).__name__}"
                )
        return nodes

    def default_user_menu(self) -> Menu:
        return Menu.default(self.options)

    def resolve_user_menu(self, request: Any = None) -> Optional[Menu]:
        """调用用户菜单回调，没有注册时返回 None"""
        if self._user_menu is None:
            return None
        menu = self.default_user_menu()
        result = self._user_menu(request, menu)
        if result is None:
            return menu
        if not isinstance(result, Menu):
            raise ConfigurationError(
                f"User menu callback must return a Menu instance, got {type(result).__name__}"
            )
        return result

    def get_menu_tree(self, request: Any = None) -> List[Dict[str, Any]]:
        """获取裁剪、序列化后的主菜单"""
        nodes = self.resolve_main_menu(request)
        tree = self.resolver.resolve(nodes, request)
        logger.debug("Resolved main menu: %d of %d top-level nodes visible", len(tree), len(nodes))
        return tree

    def get_user_menu_tree(self, request: Any = None) -> List[Dict[str, Any]]:
        menu = self.resolve_user_menu(request)
        if menu is None:
            menu = self.default_user_menu()
        return self.resolver.resolve_menu(menu, request)
