from typing import Any, Dict, Optional

from .exceptions import ConfigurationError
from .filters import MenuFilter, encode_filters, filters_from_meta
from .nodes import MenuNode
from .options import DEFAULT_OPTIONS, MenuOptions
from .utils import class_basename, headline, kebab, plural

RESOURCE_SUFFIX = 'Resource'


def resource_basename(resource: Any) -> str:
    """'app.resources.UserResource' -> 'User'"""
    base = class_basename(resource)
    if base.endswith(RESOURCE_SUFFIX) and base != RESOURCE_SUFFIX:
        base = base[:-len(RESOURCE_SUFFIX)]
    return base


def resource_uri_key(resource: Any) -> str:
    return kebab(plural(resource_basename(resource)))


class MenuItem(MenuNode):
    """菜单项（叶子节点）"""
    kind = 'item'

    def __init__(self, label: str, url: str = '#', icon: Optional[str] = None):
        super().__init__(label, icon)
        self.url = url

    @classmethod
    def make(cls, label: str, url: str = '#') -> "MenuItem":
        return cls(label, url)

    @classmethod
    def link(cls, label: str, url: str) -> "MenuItem":
        """站内链接"""
        return cls.make(label, url)

    @classmethod
    def resource(cls, resource: Any, options: MenuOptions = DEFAULT_OPTIONS) -> "MenuItem":
        """资源列表链接：UserResource -> Users, /admin/resources/users"""
        base = resource_basename(resource)
        url = f"{options.resources_path}/{resource_uri_key(resource)}"
        return cls.make(headline(plural(base)), url).merge_meta({
            'type': 'resource',
            'resource': class_basename(resource),
        })

    @classmethod
    def lens(cls, resource: Any, lens: Any, options: MenuOptions = DEFAULT_OPTIONS) -> "MenuItem":
        """资源 lens 链接：/admin/resources/users/lens/most-valuable-users"""
        lens_name = class_basename(lens)
        url = f"{options.resources_path}/{resource_uri_key(resource)}/lens/{kebab(lens_name)}"
        return cls.make(headline(lens_name), url).merge_meta({
            'type': 'lens',
            'resource': class_basename(resource),
            'lens': lens_name,
        })

    @classmethod
    def filter(cls, label: str, resource: Any, options: MenuOptions = DEFAULT_OPTIONS) -> "MenuItem":
        """带过滤条件的资源链接，用 applies() 添加条件"""
        url = f"{options.resources_path}/{resource_uri_key(resource)}"
        return cls.make(label, url).merge_meta({
            'type': 'filter',
            'resource': class_basename(resource),
            'filters': [],
        })

    @classmethod
    def external_link(cls, label: str, url: str) -> "MenuItem":
        return cls.make(label, url).with_meta('external', True)

    @classmethod
    def dashboard(cls, dashboard: Any, options: MenuOptions = DEFAULT_OPTIONS) -> "MenuItem":
        """仪表盘链接，dashboard 可以是类名字符串或 Dashboard 实例"""
        if isinstance(dashboard, str):
            return cls.make(dashboard, f"{options.dashboards_path}/{dashboard}").merge_meta({
                'dashboard': True,
                'dashboard_uri_key': dashboard,
            })

        uri_key = dashboard.uri_key
        if uri_key == 'main':
            url = options.main_dashboard_path
        else:
            url = f"{options.dashboards_path}/{uri_key}"
        item = cls.make(dashboard.name, url).merge_meta({
            'dashboard': True,
            'dashboard_uri_key': uri_key,
        })
        if getattr(dashboard, 'icon', None):
            item = item.with_icon(dashboard.icon)
        if hasattr(dashboard, 'authorized_to_see'):
            item = item.can_see(dashboard.authorized_to_see)
        return item

    def applies(self, filter: Any, value: Any, parameters: Optional[Dict[str, Any]] = None) -> "MenuItem":
        """追加过滤条件，多个条件按顺序组合"""
        if self.meta.get('type') != 'filter':
            raise ConfigurationError('Only filter menu items can apply filters')
        entry = MenuFilter(class_basename(filter), value, dict(parameters or {}))
        entries = list(self.meta.get('filters', [])) + [entry.to_dict()]
        base_url = self.url.split('?', 1)[0]
        return self._replace(
            url=encode_filters(base_url, filters_from_meta(entries)),
            meta={**self.meta, 'filters': entries},
        )

    @property
    def filters(self) -> list:
        return filters_from_meta(self.meta.get('filters'))

    def open_in_new_tab(self, open_in_new_tab: bool = True) -> "MenuItem":
        return self.with_meta('openInNewTab', open_in_new_tab)

    def method(
        self,
        method: str,
        data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> "MenuItem":
        """外部链接的请求方式，渲染层据此提交表单或发送请求"""
        meta = {**self.meta, 'method': method.upper()}
        if data:
            meta['data'] = dict(data)
        if headers:
            meta['headers'] = dict(headers)
        return self._replace(meta=meta)

    def identity_source(self) -> str:
        return f"{self.kind}:{self.label or ''}:{self.url}:{self.predicate_source()}"
