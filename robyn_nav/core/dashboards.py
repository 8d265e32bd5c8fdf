from typing import Any, Callable, Dict, Iterable, List, Optional

from ..log import logger
from .items import MenuItem
from .menu import MenuSection
from .options import DEFAULT_OPTIONS, MenuOptions
from .utils import call_with_request, headline, kebab

CATEGORY_ICONS: Dict[str, str] = {
    'Analytics': 'chart-bar',
    'Reports': 'document-text',
    'Overview': 'home',
    'General': 'view-grid',
    'Business': 'briefcase',
    'Financial': 'currency-dollar',
    'Users': 'users',
    'Content': 'document-duplicate',
    'System': 'cog',
    'Monitoring': 'eye',
    'Security': 'shield-check',
    'Marketing': 'megaphone',
    'Sales': 'trending-up',
    'Support': 'support',
    'Admin': 'user-circle',
}
DEFAULT_CATEGORY = 'General'
DEFAULT_CATEGORY_ICON = 'view-grid'


class Dashboard:
    """仪表盘描述

    name: 显示名称，默认由类名生成
    uri_key: URL 标识，'main' 表示主仪表盘
    icon: 图标
    category: 分组名称
    can_see: 可见性回调
    """
    name: Optional[str] = None
    uri_key: Optional[str] = None
    icon: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None

    def __init__(
        self,
        name: Optional[str] = None,
        uri_key: Optional[str] = None,
        icon: Optional[str] = None,
        category: Optional[str] = None,
        description: Optional[str] = None,
        can_see: Optional[Callable[..., Any]] = None,
    ):
        self.name = name or getattr(self, 'name', None) or headline(type(self).__name__)
        self.uri_key = uri_key or getattr(self, 'uri_key', None) or kebab(self.name)
        self.icon = icon or getattr(self, 'icon', None)
        self.category = category or getattr(self, 'category', None)
        self.description = description or getattr(self, 'description', None)
        self._can_see = can_see

    def authorized_to_see(self, request: Any = None) -> bool:
        if self._can_see is None:
            return True
        return bool(call_with_request(self._can_see, request))

    def menu(self, request: Any = None, options: MenuOptions = DEFAULT_OPTIONS) -> MenuItem:
        return MenuItem.dashboard(self, options)

    def __repr__(self) -> str:
        return f"<Dashboard {self.uri_key!r}>"


class DashboardMenuBuilder:
    """根据注册的仪表盘生成菜单项和按分类分组的菜单区块"""

    def __init__(self, dashboards: Iterable[Dashboard] = (), options: MenuOptions = DEFAULT_OPTIONS):
        self.dashboards: List[Dashboard] = list(dashboards)
        self.options = options

    def register(self, dashboard: Dashboard) -> None:
        self.dashboards.append(dashboard)

    def get_dashboard(self, uri_key: str) -> Optional[Dashboard]:
        return next((d for d in self.dashboards if d.uri_key == uri_key), None)

    def build_menu_item(self, dashboard: Dashboard, request: Any = None, gate: bool = True) -> Optional[MenuItem]:
        """生成单个仪表盘菜单项，生成失败时记录日志并跳过

        gate 为 False 时调用方已经检查过权限，菜单项不再带权限回调。
        """
        try:
            item = dashboard.menu(request, self.options)
            item = (
                item.with_icon(dashboard.icon or 'chart-bar')
                .merge_meta({
                    'dashboard': True,
                    'dashboard_uri_key': dashboard.uri_key,
                    'dashboard_name': dashboard.name,
                    'dashboard_description': dashboard.description,
                    'dashboard_category': dashboard.category,
                })
            )
            if gate:
                return item.can_see(dashboard.authorized_to_see)
            return item._replace(authorization=None)
        except Exception as e:
            logger.warning(
                "Failed to build menu item for dashboard %s: %s", dashboard.uri_key, e, exc_info=True
            )
            return None

    def _authorized(self, request: Any) -> List[Dashboard]:
        return [d for d in self.dashboards if d.authorized_to_see(request)]

    def build_menu_items(self, request: Any = None) -> List[MenuItem]:
        items = [self.build_menu_item(d, request, gate=False) for d in self._authorized(request)]
        return [item for item in items if item is not None]

    def build_menu_sections(self, request: Any = None) -> List[MenuSection]:
        """按分类分组，分类顺序为第一次出现的顺序"""
        grouped: Dict[str, List[Dashboard]] = {}
        for dashboard in self._authorized(request):
            grouped.setdefault(dashboard.category or DEFAULT_CATEGORY, []).append(dashboard)

        sections = []
        for category, dashboards in grouped.items():
            items = [self.build_menu_item(d, request, gate=False) for d in dashboards]
            items = [item for item in items if item is not None]
            if not items:
                continue
            sections.append(
                MenuSection.make(category, items)
                .with_icon(self.get_category_icon(category))
                .merge_meta({'dashboard_category': True, 'category_name': category})
            )
        return sections

    def build_menu_section(
        self,
        title: str,
        dashboards: Iterable[Dashboard],
        request: Any = None,
        icon: Optional[str] = None,
        collapsible: bool = False,
        badge: Any = None,
        badge_type: str = 'primary',
        can_see: Optional[Callable[..., Any]] = None,
    ) -> Optional[MenuSection]:
        items = [self.build_menu_item(d, request) for d in dashboards]
        items = [item for item in items if item is not None]
        if not items:
            return None

        section = MenuSection.make(title, items)
        if icon:
            section = section.with_icon(icon)
        if collapsible:
            section = section.collapsible()
        if badge is not None:
            section = section.with_badge(badge, badge_type)
        if can_see is not None:
            section = section.can_see(can_see)
        return section.with_meta('dashboard_section', True)

    def build_main_menu_item(self, request: Any = None) -> Optional[MenuItem]:
        """主仪表盘菜单项（uri_key 为 'main'）"""
        main = self.get_dashboard('main')
        if main is None or not main.authorized_to_see(request):
            return None
        item = self.build_menu_item(main, request, gate=False)
        if item is None:
            return None
        return item.with_icon(main.icon or 'home').with_meta('main_dashboard', True)

    @staticmethod
    def get_category_icon(category: str) -> str:
        return CATEGORY_ICONS.get(category, DEFAULT_CATEGORY_ICON)
