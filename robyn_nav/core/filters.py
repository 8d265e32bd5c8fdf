from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import urlencode

from .utils import class_basename, snake

FILTER_SUFFIX = 'Filter'


@dataclass(frozen=True)
class MenuFilter:
    """筛选资源菜单项上的一个过滤条件"""
    filter: str
    value: Any
    parameters: Dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str:
        """'StatusFilter' -> 'status'"""
        base = class_basename(self.filter)
        if base.endswith(FILTER_SUFFIX) and base != FILTER_SUFFIX:
            base = base[:-len(FILTER_SUFFIX)]
        return snake(base)

    @property
    def query_key(self) -> str:
        """查询参数键，参数值依次拼接在过滤器名后面

        ('AmountFilter', {'operator': '>='}) -> 'amount_>='
        """
        parts = [self.name]
        parts.extend(str(v) for v in self.parameters.values())
        return '_'.join(parts)

    def to_dict(self) -> dict:
        """转换为字典，放进 meta['filters']"""
        return {
            'filter': self.filter,
            'value': self.value,
            'parameters': dict(self.parameters),
        }


def encode_filters(base_url: str, filters: Iterable[MenuFilter]) -> str:
    """把过滤条件编码进 URL：/admin/resources/users?filters[status]=active

    多个条件按声明顺序拼接，同名键以后声明的值为准。
    """
    query: Dict[str, str] = {}
    for item in filters:
        query[f"filters[{item.query_key}]"] = _format_value(item.value)
    if not query:
        return base_url
    return f"{base_url}?{urlencode(list(query.items()))}"


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return '1' if value else '0'
    if value is None:
        return ''
    return str(value)


def filters_from_meta(entries: Optional[List[dict]]) -> List[MenuFilter]:
    return [
        MenuFilter(entry['filter'], entry['value'], dict(entry.get('parameters') or {}))
        for entry in (entries or [])
    ]
