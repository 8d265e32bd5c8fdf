import hashlib
from typing import Any, Callable, Iterable, Iterator, List, Optional, Tuple, Union

from .exceptions import ConfigurationError
from .items import MenuItem, resource_basename, resource_uri_key
from .nodes import MenuNode
from .options import DEFAULT_OPTIONS, MenuOptions
from .utils import headline, plural, slug


class MenuContainer(MenuNode):
    """可折叠容器（MenuGroup / MenuSection）"""
    kind = 'container'
    child_types: Tuple[type, ...] = (MenuNode,)

    def __init__(self, label: str, items: Iterable[MenuNode] = (), icon: Optional[str] = None):
        super().__init__(label, icon)
        self.items: Tuple[MenuNode, ...] = self._check_items(items)
        self._collapsible = False
        self._collapsed = False
        self._state_id: Optional[str] = None

    @classmethod
    def make(cls, label: str, items: Iterable[MenuNode] = ()):
        return cls(label, items)

    def _check_items(self, items: Iterable[MenuNode]) -> Tuple[MenuNode, ...]:
        checked = tuple(items or ())
        for item in checked:
            if not isinstance(item, self.child_types):
                allowed = ', '.join(t.__name__ for t in self.child_types)
                raise ConfigurationError(
                    f"{type(self).__name__} '{self.label}' only supports {allowed} children, "
                    f"got {type(item).__name__}"
                )
        return checked

    def with_items(self, items: Iterable[MenuNode]):
        return self._replace(items=self._check_items(items))

    def collapsible(self, collapsible: bool = True):
        return self._replace(_collapsible=collapsible)

    def collapsed(self, collapsed: bool = True):
        """初始折叠状态，只对可折叠容器有意义"""
        return self._replace(_collapsed=collapsed)

    def state_id(self, state_id: str):
        """折叠状态持久化使用的唯一键"""
        return self._replace(_state_id=state_id)

    @property
    def is_collapsible(self) -> bool:
        return self._collapsible

    @property
    def is_collapsed(self) -> bool:
        return self._collapsed

    def get_state_id(self) -> str:
        if self._state_id is not None:
            return self._state_id
        label = self.label or ''
        # 全部是标点时用标签的哈希
        key = slug(label, '_') or hashlib.md5(label.encode('utf-8')).hexdigest()[:8]
        return f"menu_{self.kind}_{key}"

    def get_path(self) -> Optional[str]:
        return None

    def validate(self) -> None:
        pass

    def identity_source(self) -> str:
        return f"{self.kind}:{self.label or ''}:{self.get_path() or ''}:{self.get_state_id()}:{self.predicate_source()}"


class MenuGroup(MenuContainer):
    """菜单分组，只能包含菜单项，不能作为顶级菜单"""
    kind = 'group'
    child_types = (MenuItem,)


class MenuSection(MenuContainer):
    """顶级菜单区块

    要么是可折叠容器，要么通过 path 直接导航，两者不能同时设置。
    """
    kind = 'section'
    child_types = (MenuGroup, MenuItem)

    def __init__(self, label: str, items: Iterable[MenuNode] = (), icon: Optional[str] = None):
        super().__init__(label, items, icon)
        self._path: Optional[str] = None

    @classmethod
    def resource(cls, resource: Any, options: MenuOptions = DEFAULT_OPTIONS) -> "MenuSection":
        name = headline(plural(resource_basename(resource)))
        return cls.make(name).path(f"{options.resources_path}/{resource_uri_key(resource)}")

    @classmethod
    def dashboard(cls, dashboard: Any, options: MenuOptions = DEFAULT_OPTIONS) -> "MenuSection":
        """仪表盘直达区块"""
        item = MenuItem.dashboard(dashboard, options)
        section = cls.make(item.label).path(item.url).with_icon(item.icon or 'chart-bar')
        section = section.merge_meta(item.meta)
        if item.authorization is not None:
            section = section._replace(authorization=item.authorization)
        return section

    def collapsible(self, collapsible: bool = True) -> "MenuSection":
        if collapsible and self._path is not None:
            raise ConfigurationError('Sections with a path cannot be collapsible')
        return super().collapsible(collapsible)

    def path(self, path: str) -> "MenuSection":
        if self._collapsible:
            raise ConfigurationError('Collapsible sections cannot have a direct path')
        return self._replace(_path=path)

    def get_path(self) -> Optional[str]:
        return self._path

    def validate(self) -> None:
        if self._collapsible and self._path is not None:
            raise ConfigurationError(
                f"Section '{self.label}' cannot be both collapsible and have a direct path"
            )


class Menu:
    """用户菜单，只接受 MenuItem

    默认菜单项（meta['default'] 为 True，例如退出登录）始终排在 append 的菜单项后面。
    """

    def __init__(self, items: Iterable[MenuItem] = ()):
        self._items: List[MenuItem] = []
        for item in items:
            self.append(item)

    @classmethod
    def default(cls, options: MenuOptions = DEFAULT_OPTIONS) -> "Menu":
        logout = (
            MenuItem.make(options.logout_label, options.logout_path)
            .with_icon(options.logout_icon)
            .merge_meta({**options.logout_meta, 'default': True})
        )
        return cls([logout])

    @staticmethod
    def _check(item: Any) -> MenuItem:
        if not isinstance(item, MenuItem):
            raise ConfigurationError(
                f"User menu only supports MenuItem objects, got {type(item).__name__}"
            )
        return item

    def _default_start(self) -> int:
        index = len(self._items)
        while index > 0 and self._items[index - 1].meta.get('default'):
            index -= 1
        return index

    def append(self, item: MenuItem) -> "Menu":
        self._items.insert(self._default_start(), self._check(item))
        return self

    def prepend(self, item: MenuItem) -> "Menu":
        self._items.insert(0, self._check(item))
        return self

    def remove(self, item: Union[MenuItem, str, Callable[[MenuItem], bool]]) -> "Menu":
        """按实例、名称或条件移除菜单项"""
        if isinstance(item, MenuItem):
            self._items = [i for i in self._items if i is not item]
        elif isinstance(item, str):
            self._items = [i for i in self._items if i.label != item]
        else:
            self._items = [i for i in self._items if not item(i)]
        return self

    def get_items(self) -> List[MenuItem]:
        return list(self._items)

    @property
    def items(self) -> List[MenuItem]:
        return self.get_items()

    def is_empty(self) -> bool:
        return not self._items

    def __iter__(self) -> Iterator[MenuItem]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> MenuItem:
        return self._items[index]

    def __repr__(self) -> str:
        return f"<Menu {[i.label for i in self._items]!r}>"
