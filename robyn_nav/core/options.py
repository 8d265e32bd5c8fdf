from dataclasses import dataclass, field, replace
from typing import Any, Dict

ADMIN_PREFIX = '/admin'


@dataclass(frozen=True)
class MenuOptions:
    """菜单配置选项"""
    admin_prefix: str = ADMIN_PREFIX
    resources_segment: str = 'resources'
    dashboards_segment: str = 'dashboards'
    logout_label: str = 'Sign out'
    logout_path: str = '/logout'
    logout_icon: str = 'arrow-right-on-rectangle'
    # 额外的默认用户菜单项配置，会原样放进 meta
    logout_meta: Dict[str, Any] = field(default_factory=lambda: {'method': 'POST'})

    @property
    def resources_path(self) -> str:
        return f"{self.admin_prefix.rstrip('/')}/{self.resources_segment}"

    @property
    def dashboards_path(self) -> str:
        return f"{self.admin_prefix.rstrip('/')}/{self.dashboards_segment}"

    @property
    def main_dashboard_path(self) -> str:
        return f"{self.admin_prefix.rstrip('/')}/dashboard"

    def set(self, **changes) -> "MenuOptions":
        """返回修改后的新配置"""
        return replace(self, **changes)


DEFAULT_OPTIONS = MenuOptions()
