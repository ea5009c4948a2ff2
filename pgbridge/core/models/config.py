"""
Bridge configuration model.

A single object handed to every entry point.  Keys follow the camelCase
names used in config files (``mcpServerUrl``, ``autoBackup``, ...); the
snake_case attribute names are accepted too.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_SERVER_URL = "http://localhost:8080/mcp"
DEFAULT_TIMEOUT_MS = 30_000
DEFAULT_BACKUP_DIR = ".mcp-backups"


class BridgeConfig(BaseModel):
    """Runtime configuration.

    Attributes:
        mcp_server_url:   Base URL of the remote generation service.
        timeout:          HTTP timeout in milliseconds.
        auto_backup:      Back up existing files before mutating them.
        backup_dir:       Backup directory, relative to the project root.
        log_level:        debug / info / warning / error.
        log_file:         Optional log file path.
        ide_project_path: Working directory reported by the IDE, if any.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    mcp_server_url: str = Field(default=DEFAULT_SERVER_URL, alias="mcpServerUrl")
    timeout: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0)
    auto_backup: bool = Field(default=True, alias="autoBackup")
    backup_dir: str = Field(default=DEFAULT_BACKUP_DIR, alias="backupDir")
    log_level: str = Field(default="info", alias="logLevel")
    log_file: str | None = Field(default=None, alias="logFile")
    ide_project_path: str | None = Field(default=None, alias="ideProjectPath")

    @field_validator("mcp_server_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("backup_dir")
    @classmethod
    def _backup_dir_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("backupDir must not be empty")
        return v.strip()

    @property
    def timeout_seconds(self) -> float:
        return self.timeout / 1000.0
