from abc import ABC, abstractmethod
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from robyn.templating import JinjaTemplate


class BaseRenderer(ABC):
    """渲染器基类"""

    @abstractmethod
    def render(self, value: Any, context: Dict[str, Any] = None) -> str:
        """渲染值"""
        pass


class JsonMenuRenderer(BaseRenderer):
    """把序列化后的菜单树编码为 JSON"""

    def __init__(self, indent: Optional[int] = None):
        self.indent = indent

    def render(self, value: Any, context: Dict[str, Any] = None) -> str:
        payload = value
        if context:
            payload = {**context, 'mainMenu': value}
        return json.dumps(payload, ensure_ascii=False, indent=self.indent, default=str)


class SidebarRenderer(BaseRenderer):
    """用 Jinja 模板渲染侧边栏 HTML"""
    template_name = 'menu/sidebar.html'

    def __init__(self, template_dir: Optional[str] = None):
        if template_dir is None:
            template_dir = os.path.join(Path(__file__).parent.parent, 'templates')
        self.template_dir = template_dir
        self.jinja_template = JinjaTemplate(template_dir)

    def render(self, value: List[Dict[str, Any]], context: Dict[str, Any] = None) -> str:
        context = context or {}
        template = self.jinja_template.env.get_template(self.template_name)
        return template.render(
            menus=value,
            user_menu=context.get('user_menu', []),
            current_path=context.get('current_path', ''),
        )
