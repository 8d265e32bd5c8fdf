from __future__ import annotations

import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from robyn_nav.core import Dashboard, DashboardMenuBuilder, MenuResolver, MenuSection  # noqa: E402
from tests.fakes import Counter, admin_request, is_admin, staff_request  # noqa: E402


class SalesOverview(Dashboard):
    category = "Sales"
    icon = "trending-up"


class BrokenDashboard(Dashboard):
    def menu(self, request=None, options=None):
        raise RuntimeError("cannot build")


class DashboardTestCase(unittest.TestCase):
    def test_defaults_from_class_name(self):
        dashboard = SalesOverview()
        self.assertEqual(dashboard.name, "Sales Overview")
        self.assertEqual(dashboard.uri_key, "sales-overview")
        self.assertEqual(dashboard.category, "Sales")

    def test_authorized_to_see(self):
        dashboard = Dashboard("Audit", can_see=is_admin)
        self.assertTrue(dashboard.authorized_to_see(admin_request()))
        self.assertFalse(dashboard.authorized_to_see(None))
        self.assertTrue(Dashboard("Open").authorized_to_see(None))


class DashboardMenuBuilderTestCase(unittest.TestCase):
    def setUp(self):
        self.builder = DashboardMenuBuilder([
            Dashboard("Main", uri_key="main", icon="home"),
            SalesOverview(),
            Dashboard("Traffic", category="Analytics"),
            Dashboard("Revenue", category="Sales"),
            Dashboard("Audit Log", category="Security", can_see=is_admin),
        ])

    def test_build_menu_item(self):
        item = self.builder.build_menu_item(SalesOverview())
        self.assertEqual(item.url, "/admin/dashboards/sales-overview")
        self.assertEqual(item.icon, "trending-up")
        self.assertEqual(item.meta["dashboard_category"], "Sales")

    def test_sections_grouped_by_first_seen_category(self):
        sections = self.builder.build_menu_sections(staff_request())
        self.assertEqual([s.label for s in sections], ["General", "Sales", "Analytics"])
        self.assertEqual([i.label for i in sections[1].items], ["Sales Overview", "Revenue"])
        self.assertEqual(sections[1].icon, "trending-up")

    def test_unauthorized_dashboards_are_skipped(self):
        labels = [s.label for s in self.builder.build_menu_sections(admin_request())]
        self.assertIn("Security", labels)
        self.assertEqual(len(self.builder.build_menu_items(staff_request())), 4)

    def test_failing_dashboard_is_skipped_with_warning(self):
        builder = DashboardMenuBuilder([BrokenDashboard("Broken"), Dashboard("Fine")])
        with self.assertLogs("robyn_nav", level="WARNING"):
            items = builder.build_menu_items(None)
        self.assertEqual([i.label for i in items], ["Fine"])

    def test_build_menu_section(self):
        section = self.builder.build_menu_section(
            "Reports", [SalesOverview(), Dashboard("Traffic")], icon="chart", collapsible=True, badge=2,
        )
        self.assertIsInstance(section, MenuSection)
        self.assertTrue(section.is_collapsible)
        self.assertEqual(section.badge.value, 2)
        self.assertIsNone(self.builder.build_menu_section("Empty", []))

    def test_main_menu_item(self):
        item = self.builder.build_main_menu_item(None)
        self.assertEqual(item.url, "/admin/dashboard")
        self.assertTrue(item.meta["main_dashboard"])

    def test_sections_resolve(self):
        tree = MenuResolver().resolve(self.builder.build_menu_sections(admin_request()), admin_request())
        security = next(s for s in tree if s["name"] == "Security")
        self.assertEqual(security["items"][0]["url"], "/admin/dashboards/audit-log")

    def test_dashboard_section(self):
        section = MenuSection.dashboard(Dashboard("Audit Log", can_see=is_admin))
        self.assertEqual(section.get_path(), "/admin/dashboards/audit-log")
        self.assertEqual(MenuResolver().resolve([section], staff_request()), [])

    def test_authorization_runs_once_per_pass(self):
        counter = Counter(result=True)
        builder = DashboardMenuBuilder([Dashboard("Audit Log", category="Security", can_see=counter)])

        tree = MenuResolver().resolve(builder.build_menu_sections(admin_request()), admin_request())
        self.assertEqual(len(tree[0]["items"]), 1)
        self.assertEqual(counter.calls, 1)

        builder.build_menu_items(admin_request())
        self.assertEqual(counter.calls, 2)

    def test_standalone_item_keeps_its_gate(self):
        item = self.builder.build_menu_item(Dashboard("Audit Log", can_see=is_admin))
        self.assertFalse(item.is_visible(staff_request()))
        self.assertTrue(item.is_visible(admin_request()))

    def test_get_dashboard(self):
        self.assertEqual(self.builder.get_dashboard("traffic").name, "Traffic")
        self.assertIsNone(self.builder.get_dashboard("missing"))


if __name__ == "__main__":
    unittest.main()
