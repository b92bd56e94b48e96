"""Integration tests for the newmodule pipeline.

These tests run the real generator, renderer and registry patcher against a
temporary ffbun project on disk and check the cross-file consistency of the
result.  No external processes or network access are required.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from ffbun_cli.config import Config
from ffbun_cli.scaffolder import ModuleGenerator


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

@pytest.mark.integration
class TestNewModuleEndToEnd:
    """Generate modules into a real directory tree."""

    async def test_order_item(self, tmp_project: Path):
        router_before = _read(tmp_project / "src" / "router.ts").splitlines()

        result = await ModuleGenerator(Config(project_root=tmp_project)).generate("order item")

        ids = result.identifiers
        assert (ids.type_name, ids.instance_name, ids.interface_name) == (
            "OrderItem",
            "orderItem",
            "IOrderItem",
        )
        module_dir = tmp_project / "src" / "modules" / "OrderItem"
        assert len(list(module_dir.iterdir())) == 5

        router_after = _read(tmp_project / "src" / "router.ts").splitlines()
        added = [line for line in router_after if line not in router_before]
        assert added == [
            'import { OrderItemRoutes } from "./modules/OrderItem/routes";',
            "    fastify.register(OrderItemRoutes);",
        ]

    async def test_files_reference_each_other(self, tmp_project: Path):
        await ModuleGenerator(Config(project_root=tmp_project)).generate("order item")
        module_dir = tmp_project / "src" / "modules" / "OrderItem"

        schema = _read(module_dir / "schema.ts")
        interfaces = _read(module_dir / "interfaces.ts")
        controller = _read(module_dir / "controller.ts")
        repository = _read(module_dir / "repository.ts")
        routes = _read(module_dir / "routes.ts")

        # schema export used by interfaces and routes
        assert "export const orderItem" in schema
        assert '(typeof schema)["orderItem"]' in interfaces
        assert "schema.orderItem" in routes
        # interface used by repository
        assert "export interface IOrderItem {" in interfaces
        assert "interfaces.IOrderItem" in repository
        # controller -> repository, routes -> controller
        assert "repository.orderItem()" in controller
        assert "export const orderItem" in repository
        assert "controller.orderItem(" in routes
        # router import -> routes export
        assert "export const OrderItemRoutes" in routes

    async def test_two_modules_keep_order(self, tmp_project: Path):
        generator = ModuleGenerator(Config(project_root=tmp_project))
        await generator.generate("order item")
        await generator.generate("customer")

        router = _read(tmp_project / "src" / "router.ts").splitlines()
        imports = [line for line in router if line.startswith("import ")]
        registrations = [line.strip() for line in router if "fastify.register(" in line]
        assert imports[-2:] == [
            'import { OrderItemRoutes } from "./modules/OrderItem/routes";',
            'import { CustomerRoutes } from "./modules/Customer/routes";',
        ]
        assert registrations == [
            "fastify.register(HealthRoutes);",
            "fastify.register(OrderItemRoutes);",
            "fastify.register(CustomerRoutes);",
        ]

    async def test_regenerating_after_delete_appends_registration(self, tmp_project: Path):
        import shutil

        generator = ModuleGenerator(Config(project_root=tmp_project))
        await generator.generate("widget")
        shutil.rmtree(tmp_project / "src" / "modules" / "Widget")
        await generator.generate("widget")

        router = _read(tmp_project / "src" / "router.ts")
        assert router.count('import { WidgetRoutes } from "./modules/Widget/routes";') == 1
        assert router.count("fastify.register(WidgetRoutes);") == 2
