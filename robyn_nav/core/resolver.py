import copy
from typing import Any, Dict, Iterable, List, Optional

from ..log import logger
from .cache import CacheStore
from .exceptions import ConfigurationError
from .items import MenuItem
from .menu import Menu, MenuContainer
from .nodes import MenuNode
from .options import DEFAULT_OPTIONS, MenuOptions


class MenuResolver:
    """菜单解析器

    resolve_tree: 按权限裁剪菜单树（深度优先，保持声明顺序）
    serialize: 把裁剪后的菜单树转换为 dict/list 结构，交给渲染层
    """

    def __init__(self, cache: Optional[CacheStore] = None, options: Optional[MenuOptions] = None):
        self.cache = cache
        self.options = options or DEFAULT_OPTIONS

    def resolve(self, nodes: Iterable[MenuNode], request: Any = None) -> List[Dict[str, Any]]:
        """裁剪并序列化"""
        return self.serialize(self.resolve_tree(nodes, request), request)

    def resolve_menu(self, menu: Menu, request: Any = None) -> List[Dict[str, Any]]:
        """解析用户菜单"""
        return self.resolve(menu.get_items(), request)

    def resolve_tree(self, nodes: Iterable[MenuNode], request: Any = None) -> List[MenuNode]:
        resolved = []
        for node in nodes or ():
            survivor = self._resolve_node(node, request)
            if survivor is not None:
                resolved.append(survivor)
        return resolved

    def _resolve_node(self, node: MenuNode, request: Any) -> Optional[MenuNode]:
        if not isinstance(node, MenuNode):
            raise ConfigurationError(f"Invalid menu node: {node!r}")
        if isinstance(node, MenuContainer):
            node.validate()

        if not node.is_visible(request, cache=self.cache):
            logger.debug("Menu node %r hidden for %s", node, _actor(request))
            return None

        if not isinstance(node, MenuContainer):
            return node

        children = self.resolve_tree(node.items, request)
        if node.is_collapsible and not children:
            # 可折叠容器没有可见子项时不输出
            logger.debug("Collapsible %r has no visible items, dropped", node)
            return None
        return node._replace(items=tuple(children))

    def serialize(self, nodes: Iterable[MenuNode], request: Any = None) -> List[Dict[str, Any]]:
        return [self.serialize_node(node, request) for node in nodes]

    def serialize_node(self, node: MenuNode, request: Any = None, visible: bool = True) -> Dict[str, Any]:
        badge = node.resolve_badge(request, cache=self.cache)
        badge_type = node.resolve_badge_type(request) if badge is not None else None

        if isinstance(node, MenuItem):
            return {
                'label': node.label,
                'url': node.url,
                'icon': node.icon,
                'badge': badge,
                'badgeType': badge_type,
                'visible': visible,
                'meta': copy.deepcopy(node.meta),
            }

        if isinstance(node, MenuContainer):
            return {
                'name': node.label,
                'path': node.get_path(),
                'icon': node.icon,
                'badge': badge,
                'badgeType': badge_type,
                'collapsible': node.is_collapsible,
                'collapsed': node.is_collapsible and node.is_collapsed,
                'stateId': node.get_state_id(),
                'visible': visible,
                'items': [self.serialize_node(child, request) for child in node.items],
                'meta': copy.deepcopy(node.meta),
            }

        raise ConfigurationError(f"Cannot serialize menu node {node!r}")


def _actor(request: Any) -> str:
    if request is None:
        return 'no request'
    return getattr(request, 'actor_key', 'request')
