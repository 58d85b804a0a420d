"""Unit tests for static route scanning of Express-style projects."""

from pathlib import Path

import pytest

from routelens.exceptions import RouteScanError
from routelens.registry.source_scanner import (
    find_entry_file,
    resolve_module,
    route_declarations,
    router_mounts,
    scan_route_groups,
)


class TestRouterMounts:
    """Tests for router_mounts."""

    def test_bound_routers_and_middleware(self) -> None:
        source = """
const authRoutes = require("./routes/auth.routes");
import userRoutes from "./routes/user.routes";
app.use(express.json());
app.use("/api/auth", authRoutes);
app.use("/api/user", protect, adminOnly, userRoutes);
"""
        assert router_mounts(source) == [
            ("/api/auth", "./routes/auth.routes"),
            ("/api/user", "./routes/user.routes"),
        ]

    def test_inline_require(self) -> None:
        source = "app.use('/api/reports', require('./routes/reports'));\n"
        assert router_mounts(source) == [("/api/reports", "./routes/reports")]

    def test_trailing_line_comment(self) -> None:
        source = (
            'const authRoutes = require("./routes/auth.routes");\n'
            'app.use("/api/auth", authRoutes); // auth\n'
            "app.use('/api/reports', require('./routes/reports')) // reports\n"
        )
        assert router_mounts(source) == [
            ("/api/auth", "./routes/auth.routes"),
            ("/api/reports", "./routes/reports"),
        ]

    def test_unbound_router_is_skipped(self) -> None:
        source = "app.use('/api/things', thingsRouter);\n"
        assert router_mounts(source) == []


class TestRouteDeclarations:
    """Tests for route_declarations."""

    def test_direct_and_chained_declarations(self) -> None:
        source = """
const router = express.Router();
router.get("/all-users", adminOnly, userController.getAllUsers);
router
  .route("/")
  .get(userController.getProfile)
  .post(adminOnly, userController.createUserByAdmin);
router.put("/:id", userController.updateUser);
"""
        routes = route_declarations(source)
        assert [(r.sub_path, r.methods) for r in routes] == [
            ("/all-users", ["GET"]),
            ("/", ["GET", "POST"]),
            ("/:id", ["PUT"]),
        ]

    def test_custom_router_name(self) -> None:
        source = "const reports = Router();\nreports.post('/export', handler);\nclient.get('/ignored');\n"
        routes = route_declarations(source)
        assert [(r.sub_path, r.methods) for r in routes] == [("/export", ["POST"])]

    def test_defaults_to_router_name(self) -> None:
        source = "router.delete(`/:id`, remove);\n"
        assert route_declarations(source)[0].methods == ["DELETE"]

    def test_no_routes(self) -> None:
        assert route_declarations("module.exports = {};\n") == []


class TestResolveModule:
    """Tests for resolve_module."""

    def test_extension_and_index_resolution(self, make_project) -> None:
        root = make_project(
            {
                "routes/auth.routes.js": "",
                "routes/admin/index.ts": "",
                "routes/plain.cjs": "",
            }
        )

        assert resolve_module(root, "./routes/auth.routes") == (root / "routes/auth.routes.js").resolve()
        assert resolve_module(root, "./routes/admin") == (root / "routes/admin/index.ts").resolve()
        assert resolve_module(root, "./routes/plain.cjs") == (root / "routes/plain.cjs").resolve()

    def test_packages_and_missing_files(self, make_project) -> None:
        root = make_project({"index.js": ""})
        assert resolve_module(root, "express") is None
        assert resolve_module(root, "./routes/missing") is None


class TestFindEntryFile:
    """Tests for find_entry_file."""

    def test_default_candidates(self, make_project) -> None:
        root = make_project({"src/app.js": ""})
        assert find_entry_file(str(root)) == root / "src" / "app.js"

    def test_explicit_entry(self, make_project) -> None:
        root = make_project({"main.js": ""})
        assert find_entry_file(str(root), "main.js") == root / "main.js"

    def test_missing_explicit_entry(self, tmp_path: Path) -> None:
        with pytest.raises(RouteScanError):
            find_entry_file(str(tmp_path), "main.js")

    def test_no_entry(self, tmp_path: Path) -> None:
        with pytest.raises(RouteScanError) as exc_info:
            find_entry_file(str(tmp_path))
        assert "No application entry file" in str(exc_info.value)


class TestScanRouteGroups:
    """Tests for scan_route_groups against the fixture project."""

    def test_fixture_groups(self, express_app_dir: Path) -> None:
        groups = scan_route_groups(str(express_app_dir))

        assert [g.base_path for g in groups] == ["/api/auth", "/api/user", "/api/reports"]
        assert [r.sub_path for r in groups[0].routes] == [
            "/register",
            "/login",
            "/verify-otp",
            "/resend-otp",
            "/forgot-password",
            "/reset-password",
        ]
        assert all(r.methods == ["POST"] for r in groups[0].routes)

    def test_unresolvable_mount_is_skipped(self, express_app_dir: Path) -> None:
        """The fixture mounts a router whose module does not exist."""
        groups = scan_route_groups(str(express_app_dir))
        assert "/api/legacy" not in [g.base_path for g in groups]

    def test_missing_entry_raises(self, tmp_path: Path) -> None:
        with pytest.raises(RouteScanError):
            scan_route_groups(str(tmp_path))
