"""Unit tests for route registry adapters and manifest loading."""

import json
from pathlib import Path
from types import SimpleNamespace

import pytest

from routelens.exceptions import RouteRegistryError
from routelens.registry.route_registry import (
    load_route_manifest,
    route_defs_from_router,
    route_groups_from_registry,
)


def layer(path=None, **methods):
    route = SimpleNamespace(path=path, methods=methods) if path is not None else None
    return SimpleNamespace(route=route, name="bound dispatch" if route else "middleware")


class TestRouteGroupsFromRegistry:
    """Tests for route_groups_from_registry with router-stack shaped input."""

    def test_attribute_style_router(self) -> None:
        router = SimpleNamespace(
            stack=[
                layer("/register", post=True),
                layer(),  # router-level middleware has no route
                layer("/session", get=True, delete=True),
            ]
        )

        groups = route_groups_from_registry([SimpleNamespace(basePath="/api/auth", router=router)])

        assert len(groups) == 1
        assert groups[0].base_path == "/api/auth"
        assert [(r.sub_path, r.methods) for r in groups[0].routes] == [
            ("/register", ["POST"]),
            ("/session", ["GET", "DELETE"]),
        ]

    def test_dict_style_router(self) -> None:
        registered = [
            {
                "basePath": "/api/user",
                "router": {"stack": [{"route": {"path": "/", "methods": {"get": True, "post": True}}}]},
            }
        ]

        groups = route_groups_from_registry(registered)

        assert groups[0].routes[0].sub_path == "/"
        assert groups[0].routes[0].methods == ["GET", "POST"]

    def test_skips_unhandled_and_internal_methods(self) -> None:
        router = {"stack": [{"route": {"path": "/x", "methods": {"_all": True, "get": False, "put": True}}}]}
        routes = route_defs_from_router(router)
        assert routes[0].methods == ["PUT"]

    def test_snake_case_base_path(self) -> None:
        groups = route_groups_from_registry([{"base_path": "/api/x", "router": {"stack": []}}])
        assert groups[0].base_path == "/api/x"
        assert groups[0].routes == []

    def test_missing_base_path_raises(self) -> None:
        with pytest.raises(RouteRegistryError) as exc_info:
            route_groups_from_registry([{"router": {"stack": []}}])
        assert "no base path" in str(exc_info.value)

    def test_preserves_registration_order(self) -> None:
        registered = [
            {"basePath": "/api/b", "router": {"stack": []}},
            {"basePath": "/api/a", "router": {"stack": []}},
        ]
        assert [g.base_path for g in route_groups_from_registry(registered)] == ["/api/b", "/api/a"]


class TestLoadRouteManifest:
    """Tests for load_route_manifest."""

    def write(self, tmp_path: Path, data) -> str:
        path = tmp_path / "routes.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)

    def test_simple_manifest(self, tmp_path: Path) -> None:
        manifest = self.write(
            tmp_path,
            [
                {
                    "basePath": "/api/auth",
                    "routes": [
                        {"path": "/register", "methods": ["post"]},
                        {"subPath": "/me", "methods": {"get": True, "put": True}},
                    ],
                }
            ],
        )

        groups = load_route_manifest(manifest)

        assert groups[0].base_path == "/api/auth"
        assert [(r.sub_path, r.methods) for r in groups[0].routes] == [
            ("/register", ["POST"]),
            ("/me", ["GET", "PUT"]),
        ]

    def test_groups_key_and_registry_shape(self, tmp_path: Path) -> None:
        manifest = self.write(
            tmp_path,
            {
                "groups": [
                    {
                        "basePath": "/api/user",
                        "router": {"stack": [{"route": {"path": "/:id", "methods": {"delete": True}}}]},
                    }
                ]
            },
        )

        groups = load_route_manifest(manifest)

        assert groups[0].routes[0].sub_path == "/:id"
        assert groups[0].routes[0].methods == ["DELETE"]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(RouteRegistryError) as exc_info:
            load_route_manifest(str(tmp_path / "missing.json"))
        assert "Cannot read route manifest" in str(exc_info.value)

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "routes.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(RouteRegistryError):
            load_route_manifest(str(path))

    def test_not_a_list(self, tmp_path: Path) -> None:
        with pytest.raises(RouteRegistryError) as exc_info:
            load_route_manifest(self.write(tmp_path, {"basePath": "/api"}))
        assert "must contain a list" in str(exc_info.value)

    def test_invalid_route_entry(self, tmp_path: Path) -> None:
        manifest = self.write(tmp_path, [{"basePath": "/api/auth", "routes": [{"methods": ["get"]}]}])
        with pytest.raises(RouteRegistryError) as exc_info:
            load_route_manifest(manifest)
        assert "Invalid route manifest" in str(exc_info.value)

    def test_null_routes(self, tmp_path: Path) -> None:
        manifest = self.write(tmp_path, [{"basePath": "/api/auth", "routes": None}])
        with pytest.raises(RouteRegistryError) as exc_info:
            load_route_manifest(manifest)
        assert "must be a list" in str(exc_info.value)

    def test_methods_as_bare_string(self, tmp_path: Path) -> None:
        """A single method name is rejected rather than silently dropping the route."""
        manifest = self.write(
            tmp_path, [{"basePath": "/api/auth", "routes": [{"path": "/login", "methods": "POST"}]}]
        )
        with pytest.raises(RouteRegistryError) as exc_info:
            load_route_manifest(manifest)
        assert "list or a mapping" in str(exc_info.value)

    def test_route_without_methods(self, tmp_path: Path) -> None:
        manifest = self.write(tmp_path, [{"basePath": "/api/auth", "routes": [{"path": "/login"}]}])
        assert load_route_manifest(manifest)[0].routes[0].methods == []

    def test_non_object_group(self, tmp_path: Path) -> None:
        with pytest.raises(RouteRegistryError):
            load_route_manifest(self.write(tmp_path, ["/api/auth"]))
