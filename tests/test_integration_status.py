"""
Tests for the integration status probe.
"""

import os
import sys
from pathlib import Path

import pytest

from pgbridge.core.services.integration_status import (
    SOURCE_PREFIX_CHARS,
    check_integration_status,
    find_java_files,
)

POM_WITH_JPA = """
<project>
  <dependencies>
    <dependency><artifactId>spring-boot-starter-data-jpa</artifactId></dependency>
    <dependency><groupId>org.postgresql</groupId><artifactId>postgresql</artifactId></dependency>
  </dependencies>
</project>
"""

APPLICATION_YML = """
spring:
  datasource:
    url: jdbc:postgresql://localhost:5432/shop
"""


def _write(root: Path, rel: str, content: str) -> None:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


@pytest.fixture
def integrated_project(tmp_path: Path) -> Path:
    java = "src/main/java/com/example"
    _write(tmp_path, "pom.xml", POM_WITH_JPA)
    _write(tmp_path, "src/main/resources/application.yml", APPLICATION_YML)
    _write(tmp_path, f"{java}/entity/User.java", "@Entity\npublic class User {}")
    _write(tmp_path, f"{java}/repository/UserRepository.java",
           "public interface UserRepository extends JpaRepository<User, Long> {}")
    _write(tmp_path, f"{java}/service/UserService.java", "@Service\npublic class UserService {}")
    _write(tmp_path, f"{java}/controller/UserController.java",
           "@RestController\npublic class UserController {}")
    return tmp_path


class TestCheckIntegrationStatus:
    def test_empty_directory(self, tmp_path: Path):
        status = check_integration_status(tmp_path)
        assert status.configured is False
        assert not any(status.components.model_dump().values())
        assert len(status.missing()) == 6

    def test_missing_directory_does_not_raise(self, tmp_path: Path):
        status = check_integration_status(tmp_path / "ghost")
        assert status.configured is False

    def test_fully_integrated(self, integrated_project: Path):
        status = check_integration_status(integrated_project)
        assert status.configured is True
        assert all(status.components.model_dump().values())
        assert status.missing() == []

    def test_configured_needs_both(self, tmp_path: Path):
        _write(tmp_path, "pom.xml", POM_WITH_JPA)
        status = check_integration_status(tmp_path)
        assert status.components.dependencies is True
        assert status.components.configuration is False
        assert status.configured is False

    def test_gradle_and_properties(self, tmp_path: Path):
        _write(tmp_path, "build.gradle",
               "implementation 'org.springframework.boot:spring-boot-starter-data-jpa'\n"
               "runtimeOnly 'org.postgresql:postgresql'\n")
        _write(tmp_path, "src/main/resources/application.properties",
               "spring.datasource.url=jdbc:postgresql://db/shop\n")
        assert check_integration_status(tmp_path).configured is True

    def test_repository_needs_repository_directory(self, tmp_path: Path):
        _write(tmp_path, "src/main/java/com/example/dao/UserRepository.java",
               "public interface UserRepository {}")
        assert check_integration_status(tmp_path).components.repositories is False

    def test_annotation_past_prefix_not_seen(self, tmp_path: Path):
        padding = "// filler\n" * (SOURCE_PREFIX_CHARS // 10 + 1)
        _write(tmp_path, "src/main/java/Late.java", padding + "@Entity\nclass Late {}")
        assert check_integration_status(tmp_path).components.entities is False


def test_find_java_files_recurses(integrated_project: Path):
    samples = find_java_files(integrated_project / "src/main/java")
    assert sorted(s.path.name for s in samples) == [
        "User.java", "UserController.java", "UserRepository.java", "UserService.java",
    ]


@pytest.mark.skipif(
    sys.platform == "win32" or os.geteuid() == 0,
    reason="needs POSIX permissions and a non-root user",
)
def test_unreadable_directory_skipped(tmp_path: Path):
    java = "src/main/java/com/example"
    _write(tmp_path, f"{java}/entity/User.java", "@Entity\npublic class User {}")
    _write(tmp_path, f"{java}/locked/Hidden.java", "@Service\npublic class Hidden {}")
    locked = tmp_path / java / "locked"
    locked.chmod(0)
    try:
        status = check_integration_status(tmp_path)
        samples = find_java_files(tmp_path / "src/main/java")
    finally:
        locked.chmod(0o755)

    assert status.components.entities is True
    assert status.components.services is False
    assert [s.path.name for s in samples] == ["User.java"]


def test_deep_tree_does_not_overflow(tmp_path: Path):
    depth = min(sys.getrecursionlimit(), 1500) + 100
    base = tmp_path / "src/main/java"
    base.mkdir(parents=True)
    levels = []
    current = base
    for _ in range(depth):
        current = current / "d"
        current.mkdir()
        levels.append(current)
    leaf = current / "Deep.java"
    leaf.write_text("@Entity\nclass Deep {}")

    try:
        status = check_integration_status(tmp_path)
    finally:
        leaf.unlink()
        for level in reversed(levels):
            level.rmdir()

    assert status.components.entities is True
