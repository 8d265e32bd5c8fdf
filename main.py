from typing import Optional, Dict, Iterable, Union
from types import ModuleType

from robyn import Robyn
from tortoise import Tortoise, connections
from tortoise.log import logger

from robyn_nav.core import (
    Badge, Dashboard, DashboardMenuBuilder, InMemoryCacheStore, Menu,
    MenuGroup, MenuItem, MenuSection, MenuSite,
)
from robyn_nav.models import AdminUser


## 注册tortoise-orm
def register_tortoise(
    app: Robyn,
    db_url: Optional[str] = None,
    modules: Optional[Dict[str, Iterable[Union[str, ModuleType]]]] = None,
    generate_schemas: bool = False,
):
    @app.startup_handler
    async def init_orm():  # pylint: disable=W0612
        await Tortoise.init(db_url=db_url, modules=modules)
        if generate_schemas:
            logger.info("Tortoise-ORM generating schema")
            await Tortoise.generate_schemas()
        # 创建默认超级用户
        if not await AdminUser.filter(username="admin").exists():
            await AdminUser.create(
                username="admin",
                password=AdminUser.hash_password("admin"),
                email="admin@example.com",
                is_superuser=True,
            )
        logger.info("Tortoise-ORM started, %s, %s", connections._get_storage(), Tortoise.apps)

    @app.shutdown_handler
    async def shutdown_orm():  # pylint: disable=W0612
        await Tortoise.close_connections()
        logger.info("Tortoise-ORM connections closed")


def is_admin(request) -> bool:
    return bool(request and request.user and request.user.is_superuser)


def has_perm(permission: str):
    def check(request) -> bool:
        return bool(request and request.user and request.user.has_perm(permission))
    return check


app = Robyn(__file__)

register_tortoise(
    app,
    db_url="sqlite://admin.db",
    modules={"models": ["robyn_nav.models"]},
    generate_schemas=True,
)

site = MenuSite(app, name="admin", cache=InMemoryCacheStore())

dashboards = DashboardMenuBuilder([
    Dashboard("Main", uri_key="main", icon="home"),
    Dashboard("Sales Overview", category="Sales"),
    Dashboard("Traffic", category="Analytics"),
    Dashboard("Audit Log", category="Security", can_see=is_admin),
])


@site.main_menu
def main_menu(request):
    return [
        MenuSection.make("Dashboard").path("/admin/dashboard").with_icon("speedometer2"),
        MenuSection.make("Business Management", [
            MenuGroup.make("Licensing", [
                MenuItem.resource("LicenseResource"),
                MenuItem.filter("Expiring Licenses", "LicenseResource")
                    .applies("StatusFilter", "expiring")
                    .with_badge(Badge.make(lambda: 3, "warning").cache(300)),
            ]).collapsible().collapsed(),
            MenuGroup.make("Financial", [
                MenuItem.resource("InvoiceResource").can_see(has_perm("invoices.view")),
                MenuItem.lens("InvoiceResource", "OverdueInvoices").cache_auth(60),
            ]).collapsible(),
        ]).collapsible().with_icon("briefcase"),
        MenuSection.make("Users", [
            MenuItem.resource("UserResource").can_see(is_admin),
        ]).collapsible().collapsed().with_icon("people"),
        *dashboards.build_menu_sections(request),
        MenuSection.make("Help", [
            MenuItem.external_link("Documentation", "https://robyn.tech/documentation")
                .open_in_new_tab(),
        ]),
    ]


@site.user_menu
def user_menu(request, menu: Menu):
    if request and request.user:
        menu.prepend(
            MenuItem.make(f"Profile ({request.user.username})", f"/admin/profile/{request.user.id}")
            .with_icon("person")
        )
    return menu


if __name__ == "__main__":
    app.start(host="127.0.0.1", port=8100)
