"""
Tests for CLI commands — serve, health, status, apply, and global options.
"""

import json
from pathlib import Path

from click.testing import CliRunner

from pgbridge.adapters.generation_client import GenerationClient
from pgbridge.core.errors import ConnectivityError
from pgbridge.main import cli


class TestCLIGlobal:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "MCP bridge" in result.output
        for command in ("serve", "health", "status", "apply"):
            assert command in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_missing_config_file(self, tmp_path: Path):
        result = CliRunner().invoke(cli, ["--config", str(tmp_path / "nope.yml"), "status"])
        assert result.exit_code == 1
        assert "not found" in result.output


class TestStatusCommand:
    def test_json(self, java_project: Path):
        result = CliRunner().invoke(cli, ["-q", "status", str(java_project), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["projectPath"] == str(java_project.resolve())
        assert data["configured"] is False
        assert set(data["components"]) == {
            "dependencies", "configuration", "entities", "repositories", "services", "controllers",
        }

    def test_human(self, java_project: Path):
        result = CliRunner().invoke(cli, ["-q", "status", str(java_project)])
        assert result.exit_code == 0
        assert "not configured" in result.output
        assert "dependencies" in result.output

    def test_missing_path(self, tmp_path: Path):
        result = CliRunner().invoke(cli, ["-q", "status", str(tmp_path / "ghost")])
        assert result.exit_code == 1
        assert "Invalid project path" in result.output


class TestApplyCommand:
    def _execution_file(self, tmp_path: Path, files: list[dict]) -> Path:
        path = tmp_path / "execution.json"
        path.write_text(json.dumps({
            "executionId": "e-1",
            "generatedFiles": [{"category": "entities", "files": files}],
        }))
        return path

    def test_apply_json(self, tmp_path: Path, java_project: Path):
        source = self._execution_file(tmp_path, [
            {"path": "src/main/java/com/example/entity/User.java", "action": "create", "content": "class User {}"},
        ])
        result = CliRunner().invoke(
            cli, ["-q", "apply", str(source), "--project", str(java_project), "--json"],
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["appliedCount"] == 1
        assert (java_project / "src/main/java/com/example/entity/User.java").read_text() == "class User {}"

    def test_apply_bare_list_with_strategy(self, tmp_path: Path, java_project: Path):
        (java_project / "notes.txt").write_text("old")
        source = tmp_path / "files.json"
        source.write_text(json.dumps([
            {"category": "docs", "files": [{"path": "notes.txt", "action": "modify", "content": "new"}]},
        ]))

        result = CliRunner().invoke(cli, [
            "-q", "apply", str(source), "--project", str(java_project),
            "--strategy", "replace", "--no-backup",
        ])

        assert result.exit_code == 0
        assert (java_project / "notes.txt").read_text() == "new"
        assert not (java_project / ".mcp-backups").exists()

    def test_apply_errors_exit_nonzero(self, tmp_path: Path, java_project: Path):
        source = self._execution_file(tmp_path, [
            {"path": "../escape.txt", "action": "create", "content": "x"},
        ])
        result = CliRunner().invoke(cli, ["-q", "apply", str(source), "--project", str(java_project)])
        assert result.exit_code == 1
        assert "escapes project root" in result.output
        assert not (tmp_path / "escape.txt").exists()

    def test_apply_rejects_unknown_shape(self, tmp_path: Path, java_project: Path):
        source = tmp_path / "bad.json"
        source.write_text(json.dumps({"hello": "world"}))
        result = CliRunner().invoke(cli, ["-q", "apply", str(source), "--project", str(java_project)])
        assert result.exit_code != 0
        assert "generatedFiles" in result.output


class TestBackupsCommand:
    def test_lists_backups_after_apply(self, tmp_path: Path, java_project: Path):
        (java_project / "notes.txt").write_text("old")
        source = tmp_path / "files.json"
        source.write_text(json.dumps([
            {"category": "docs", "files": [{"path": "notes.txt", "action": "modify", "content": "new"}]},
        ]))
        CliRunner().invoke(cli, ["-q", "apply", str(source), "--project", str(java_project)])

        result = CliRunner().invoke(cli, ["-q", "backups", str(java_project), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["backupDir"] == str(java_project.resolve() / ".mcp-backups")
        assert len(data["backups"]) == 1
        assert data["backups"][0]["original"] == "notes.txt"
        assert data["backups"][0]["size_bytes"] == 3

    def test_no_backups(self, java_project: Path):
        result = CliRunner().invoke(cli, ["-q", "backups", str(java_project)])
        assert result.exit_code == 0
        assert "No backups" in result.output

    def test_missing_path(self, tmp_path: Path):
        result = CliRunner().invoke(cli, ["-q", "backups", str(tmp_path / "ghost")])
        assert result.exit_code == 1
        assert "Invalid project path" in result.output


class TestHealthCommand:
    def test_up(self, monkeypatch):
        monkeypatch.setattr(GenerationClient, "health", lambda self: {"status": "UP"})
        result = CliRunner().invoke(cli, ["-q", "health"])
        assert result.exit_code == 0
        assert "UP" in result.output

    def test_unreachable_json(self, monkeypatch):
        def boom(self):
            raise ConnectivityError("Cannot connect to http://localhost:8080/mcp: refused")

        monkeypatch.setattr(GenerationClient, "health", boom)
        result = CliRunner().invoke(cli, ["-q", "health", "--json"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["ok"] is False
        assert data["error"].startswith("Cannot reach generation service")


class TestServeCommand:
    def test_health_failure_exits(self, monkeypatch):
        def down(self):
            raise ConnectivityError("status='DOWN'")

        called = []
        monkeypatch.setattr(GenerationClient, "check_connection", down)
        monkeypatch.setattr("pgbridge.ui.mcp.server.run_server", lambda config: called.append(config))

        result = CliRunner().invoke(cli, ["-q", "serve"])

        assert result.exit_code == 1
        assert called == []

    def test_skip_health_check(self, monkeypatch):
        called = []
        monkeypatch.setattr("pgbridge.ui.mcp.server.run_server", lambda config: called.append(config))

        result = CliRunner().invoke(cli, ["-q", "serve", "--skip-health-check"])

        assert result.exit_code == 0
        assert len(called) == 1
        assert called[0].mcp_server_url == "http://localhost:8080/mcp"
