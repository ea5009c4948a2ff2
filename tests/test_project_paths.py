"""
Tests for project root resolution and package-path correction.
"""

from pathlib import Path

import pytest

from pgbridge.core.errors import InvalidProjectPath
from pgbridge.core.services.project_paths import (
    correct_package_path,
    discover_project_root,
    is_project_name_segment,
    resolve_project_root,
)


class TestCorrectPackagePath:
    def test_strips_project_name_segment(self):
        path = "src/main/java/com/example/test_service/entity/User.java"
        content = (
            "package com.example.test_service.entity;\n\n"
            "import com.example.test_service.repository.UserRepository;\n"
        )
        new_path, new_content = correct_package_path(path, content)

        assert new_path == "src/main/java/com/example/entity/User.java"
        assert "package com.example.entity;" in new_content
        assert "import com.example.repository.UserRepository;" in new_content
        assert "test_service" not in new_content

    def test_mixed_case_segment_untouched(self):
        path = "src/main/java/com/example/Shared/entity/User.java"
        content = "package com.example.Shared.entity;"
        assert correct_package_path(path, content) == (path, content)

    def test_file_directly_below_segment_untouched(self):
        path = "src/main/java/com/example/entity/User.java"
        assert correct_package_path(path, "x")[0] == path

    def test_outside_base_package_untouched(self):
        path = "src/main/java/org/other/my_app/entity/User.java"
        assert correct_package_path(path, None) == (path, None)

    def test_lower_case_real_package_is_also_stripped(self):
        # Heuristic limitation: a genuine lower-case package is indistinguishable
        path = "src/main/java/com/example/service/impl/UserServiceImpl.java"
        new_path, _ = correct_package_path(path, None)
        assert new_path == "src/main/java/com/example/impl/UserServiceImpl.java"

    def test_custom_base_package(self):
        path = "src/main/java/com/acme/shop/orders_api/controller/OrderController.java"
        content = "package com.acme.shop.orders_api.controller;"
        new_path, new_content = correct_package_path(path, content, base_package="com.acme.shop")
        assert new_path == "src/main/java/com/acme/shop/controller/OrderController.java"
        assert new_content == "package com.acme.shop.controller;"

    def test_empty_base_package_disables(self):
        path = "src/main/java/com/example/test_service/entity/User.java"
        assert correct_package_path(path, None, base_package="")[0] == path

    def test_longer_segment_names_not_rewritten_in_content(self):
        path = "src/main/java/com/example/app/entity/User.java"
        content = "import com.example.application.Config;\npackage com.example.app.entity;"
        _, new_content = correct_package_path(path, content)
        assert "com.example.application.Config" in new_content
        assert "package com.example.entity;" in new_content


class TestSegmentHeuristic:
    @pytest.mark.parametrize("segment", ["test_service", "orders", "My_App"])
    def test_matches(self, segment):
        assert is_project_name_segment(segment)

    @pytest.mark.parametrize("segment", ["Shared", "OrdersApi"])
    def test_does_not_match(self, segment):
        assert not is_project_name_segment(segment)


class TestDiscoverProjectRoot:
    def test_finds_marker_in_parent(self, java_project: Path):
        deep = java_project / "src" / "main" / "java" / "com"
        deep.mkdir(parents=True)
        assert discover_project_root(deep) == java_project

    def test_respects_level_limit(self, java_project: Path):
        deep = java_project / "a" / "b" / "c"
        deep.mkdir(parents=True)
        assert discover_project_root(deep, max_levels=2) is None


class TestResolveProjectRoot:
    def test_absolute_path(self, java_project: Path):
        assert resolve_project_root(str(java_project)) == java_project.resolve()

    def test_missing_path_raises(self, tmp_path: Path):
        with pytest.raises(InvalidProjectPath):
            resolve_project_root(str(tmp_path / "nope"))

    def test_file_path_raises(self, tmp_path: Path):
        f = tmp_path / "file.txt"
        f.write_text("x")
        with pytest.raises(InvalidProjectPath, match="not a directory"):
            resolve_project_root(str(f))

    def test_discovers_from_cwd(self, java_project: Path):
        cwd = java_project / "src" / "main"
        cwd.mkdir(parents=True)
        assert resolve_project_root(".", cwd=cwd) == java_project.resolve()

    def test_relative_path_joined_to_cwd(self, java_project: Path):
        assert resolve_project_root("shop", cwd=java_project.parent) == java_project.resolve()

    def test_ide_path_wins_over_cwd(self, tmp_path: Path, java_project: Path):
        elsewhere = tmp_path / "elsewhere"
        elsewhere.mkdir()
        root = resolve_project_root(".", cwd=elsewhere, ide_path=str(java_project))
        assert root == java_project.resolve()

    def test_ide_path_joined_with_nominal(self, tmp_path: Path, java_project: Path):
        module = java_project / "orders"
        module.mkdir()
        root = resolve_project_root("orders", cwd=tmp_path, ide_path=str(java_project))
        assert root == module.resolve()

    def test_ide_path_equal_to_cwd_falls_back_to_discovery(self, java_project: Path):
        sub = java_project / "docs"
        sub.mkdir()
        root = resolve_project_root(".", cwd=sub, ide_path=str(sub))
        assert root == java_project.resolve()
