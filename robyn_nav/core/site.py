import json
from typing import Any, Awaitable, Callable, Dict, Optional

from robyn import Request, Response, Robyn

from ..log import logger
from ..models import AdminUser
from ..renderers import JsonMenuRenderer, SidebarRenderer
from .cache import CacheStore
from .context import RequestContext
from .manager import MainMenuCallback, MenuManager, UserMenuCallback
from .options import MenuOptions

UserLoader = Callable[[Any], Awaitable[Any]]


class MenuSite:
    """菜单站点，把菜单解析挂载到 Robyn 应用

    GET /{name}/api/menu          主菜单和用户菜单 JSON
    GET /{name}/api/menu/sidebar  侧边栏 HTML
    """

    def __init__(
        self,
        app: Robyn,
        name: str = 'admin',
        cache: Optional[CacheStore] = None,
        options: Optional[MenuOptions] = None,
        manager: Optional[MenuManager] = None,
        user_loader: Optional[UserLoader] = None,
        template_dir: Optional[str] = None,
    ):
        """
        :param app: Robyn应用实例
        :param name: 路由前缀
        :param cache: 徽章和权限缓存，None 表示不缓存
        :param user_loader: 根据 session 中的 user_id 加载当前用户，默认查询 AdminUser
        """
        self.app = app
        self.name = name
        self.manager = manager or MenuManager(cache=cache, options=options)
        self.user_loader = user_loader or self._load_admin_user
        self.json_renderer = JsonMenuRenderer()
        self.sidebar_renderer = SidebarRenderer(template_dir)

        self._setup_routes()

    def main_menu(self, callback: MainMenuCallback) -> MainMenuCallback:
        return self.manager.main_menu(callback)

    def user_menu(self, callback: UserMenuCallback) -> UserMenuCallback:
        return self.manager.user_menu(callback)

    def _setup_routes(self):
        """设置路由"""

        @self.app.get(f"/{self.name}/api/menu")
        async def menu_tree(request: Request):
            try:
                context = await self.build_context(request)
                payload = self.menu_payload(context)
            except Exception as e:
                # 菜单解析失败时不返回部分结果
                logger.exception("Menu resolution failed for %s", self.name)
                return Response(
                    status_code=500,
                    description=json.dumps({"error": str(e)}),
                    headers={"Content-Type": "application/json"},
                )
            return Response(
                status_code=200,
                description=self.json_renderer.render(payload),
                headers={"Content-Type": "application/json"},
            )

        @self.app.get(f"/{self.name}/api/menu/sidebar")
        async def menu_sidebar(request: Request):
            try:
                context = await self.build_context(request)
                payload = self.menu_payload(context)
                html = self.sidebar_renderer.render(payload["mainMenu"], {
                    "user_menu": payload["userMenu"],
                    "current_path": context.path,
                })
            except Exception as e:
                logger.exception("Sidebar rendering failed for %s", self.name)
                return Response(status_code=500, description=f"菜单渲染失败: {str(e)}", headers={})
            return Response(status_code=200, description=html, headers={"Content-Type": "text/html"})

    def menu_payload(self, context: Optional[RequestContext]) -> Dict[str, Any]:
        return {
            "mainMenu": self.manager.get_menu_tree(context),
            "userMenu": self.manager.get_user_menu_tree(context),
        }

    async def build_context(self, request: Request) -> RequestContext:
        user = await self._get_current_user(request)
        url = getattr(request, "url", None)
        return RequestContext(
            user=user,
            query_params=self._query_params(request),
            path=getattr(url, "path", None) or "/",
        )

    @staticmethod
    def _query_params(request: Request) -> Dict[str, str]:
        query_params = getattr(request, "query_params", None)
        if query_params is None:
            return {}
        params = query_params.to_dict()
        return {
            key: value[0] if isinstance(value, list) and value else value
            for key, value in params.items()
        }

    @staticmethod
    def parse_session(cookie_header: Optional[str]) -> Dict[str, Any]:
        """从 Cookie 头中解析 session={"user_id": 1}"""
        if not cookie_header:
            return {}
        cookies = {}
        for item in cookie_header.split(";"):
            if "=" in item:
                key, value = item.split("=", 1)
                cookies[key.strip()] = value.strip()
        session = cookies.get("session")
        if not session:
            return {}
        try:
            data = json.loads(session)
        except json.JSONDecodeError:
            return {}
        return data if isinstance(data, dict) else {}

    async def _get_current_user(self, request: Request) -> Any:
        """获取当前登录用户"""
        session = self.parse_session(request.headers.get("Cookie"))
        user_id = session.get("user_id")
        if not user_id:
            return None
        return await self.user_loader(user_id)

    @staticmethod
    async def _load_admin_user(user_id: Any) -> Optional[AdminUser]:
        return await AdminUser.filter(id=user_id, is_active=True).first()
