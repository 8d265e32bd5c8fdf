from __future__ import annotations

import asyncio
import json
import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from robyn_nav.core import InMemoryCacheStore, MenuItem, MenuSection, MenuSite, RequestContext  # noqa: E402
from robyn_nav.renderers import JsonMenuRenderer, SidebarRenderer  # noqa: E402
from tests.fakes import FakeApp, FakeUser, fake_request, is_admin  # noqa: E402

USERS = {1: FakeUser(1, is_superuser=True), 2: FakeUser(2)}


async def load_user(user_id):
    return USERS.get(user_id)


def build_site(app=None):
    site = MenuSite(app or FakeApp(), name="admin", cache=InMemoryCacheStore(), user_loader=load_user)

    @site.main_menu
    def main_menu(request):
        return [
            MenuSection.make("Dashboard").path("/dashboard"),
            MenuSection.make("Users", [
                MenuItem.resource("UserResource").can_see(is_admin),
            ]).collapsible().collapsed(),
        ]

    return site


class SessionTestCase(unittest.TestCase):
    def test_parse_session(self):
        cookie = 'theme=dark; session={"user_id": 1}'
        self.assertEqual(MenuSite.parse_session(cookie), {"user_id": 1})

    def test_invalid_session(self):
        self.assertEqual(MenuSite.parse_session(None), {})
        self.assertEqual(MenuSite.parse_session("theme=dark"), {})
        self.assertEqual(MenuSite.parse_session("session=garbage"), {})
        self.assertEqual(MenuSite.parse_session("session=[1, 2]"), {})


class MenuSiteTestCase(unittest.TestCase):
    def setUp(self):
        self.app = FakeApp()
        self.site = build_site(self.app)

    def test_routes_are_registered(self):
        self.assertIn("/admin/api/menu", self.app.routes)
        self.assertIn("/admin/api/menu/sidebar", self.app.routes)

    def test_build_context(self):
        request = fake_request('session={"user_id": 1}', path="/admin/users", query={"page": ["2"]})
        context = asyncio.run(self.site.build_context(request))
        self.assertIs(context.user, USERS[1])
        self.assertEqual(context.path, "/admin/users")
        self.assertEqual(context.query_params, {"page": "2"})
        self.assertEqual(context.actor_key, "user_1")

    def test_anonymous_context(self):
        context = asyncio.run(self.site.build_context(fake_request()))
        self.assertIsNone(context.user)
        self.assertEqual(context.actor_key, "guest")

    def test_menu_payload_depends_on_actor(self):
        admin = self.site.menu_payload(RequestContext(user=USERS[1]))
        staff = self.site.menu_payload(RequestContext(user=USERS[2]))
        self.assertEqual([n["name"] for n in admin["mainMenu"]], ["Dashboard", "Users"])
        self.assertEqual([n["name"] for n in staff["mainMenu"]], ["Dashboard"])
        self.assertEqual([i["label"] for i in staff["userMenu"]], ["Sign out"])

    def test_menu_route(self):
        handler = self.app.routes["/admin/api/menu"]
        response = asyncio.run(handler(fake_request('session={"user_id": 1}')))
        self.assertEqual(response.status_code, 200)

    def test_menu_route_failure_returns_500(self):
        self.site.main_menu(lambda request: [MenuSection.make("Broken")._replace(_collapsible=True, _path="/x")])
        handler = self.app.routes["/admin/api/menu"]
        with self.assertLogs("robyn_nav", level="ERROR"):
            response = asyncio.run(handler(fake_request()))
        self.assertEqual(response.status_code, 500)


class RendererTestCase(unittest.TestCase):
    def setUp(self):
        self.site = build_site()
        self.payload = self.site.menu_payload(RequestContext(user=USERS[1], path="/dashboard"))

    def test_json_renderer(self):
        rendered = JsonMenuRenderer().render(self.payload["mainMenu"])
        self.assertEqual(json.loads(rendered), self.payload["mainMenu"])

    def test_json_renderer_with_context(self):
        rendered = json.loads(JsonMenuRenderer().render([], {"userMenu": []}))
        self.assertEqual(rendered, {"userMenu": [], "mainMenu": []})

    def test_sidebar_renderer(self):
        html = SidebarRenderer().render(self.payload["mainMenu"], {
            "user_menu": self.payload["userMenu"],
            "current_path": "/dashboard",
        })
        self.assertIn('data-state-id="menu_section_users"', html)
        self.assertIn('href="/admin/resources/users"', html)
        self.assertIn("Sign out", html)
        self.assertIn('data-collapsed="true"', html)


if __name__ == "__main__":
    unittest.main()
