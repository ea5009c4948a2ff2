"""
MCP server — exposes the integration tools over stdio.

    IDE ──stdio/JSON-RPC──▶ BridgeServer ──▶ use_cases ──HTTP──▶ generation service
                                  │
                                  └──▶ project tree (apply / probe)

Tool handlers are synchronous; they run in a worker thread so the event
loop keeps answering protocol traffic. A failing call becomes an error
result for that call only; the server keeps serving.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

import mcp.server.stdio
import mcp.types as types
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from pydantic import BaseModel, ValidationError

from pgbridge import __version__
from pgbridge.core.errors import BridgeError
from pgbridge.core.models.config import BridgeConfig
from pgbridge.core.models.generation import ExecuteArgs, GenerateArgs, PlanArgs, StatusArgs
from pgbridge.core.use_cases import generate
from pgbridge.core.use_cases.status import status_report

logger = logging.getLogger(__name__)

SERVER_NAME = "postgresql-integration"


class ToolFailure(Exception):
    """Raised out of a tool call; the MCP runtime reports it with ``isError``."""


# ═══════════════════════════════════════════════════════════════════
#  Input schemas
# ═══════════════════════════════════════════════════════════════════

_PREFERENCES_SCHEMA: dict[str, Any] = {
    "type": "object",
    "description": "Generation preferences",
    "properties": {
        "useLombok": {"type": "boolean", "default": True},
        "includeValidation": {"type": "boolean", "default": True},
        "namingStrategy": {"type": "string", "enum": ["snake_case", "camelCase"], "default": "snake_case"},
        "generateTests": {"type": "boolean", "default": False},
        "mergeStrategy": {"type": "string", "enum": ["smart", "append", "replace"], "default": "smart"},
        "removeProjectNameFromPath": {"type": "boolean", "default": True},
        "basePackage": {"type": "string", "description": "Target base package (e.g. com.acme.shop)"},
    },
}

_SCHEMA_SCHEMA: dict[str, Any] = {
    "type": "object",
    "description": "Database schema definition",
    "properties": {
        "tables": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "columns": {"type": "array", "items": {"type": "object"}},
                },
                "required": ["name"],
            },
        },
    },
    "required": ["tables"],
}

_PROJECT_PATH_SCHEMA: dict[str, Any] = {
    "type": "string",
    "description": "Path to the project root (default: current directory)",
    "default": ".",
}

_APPLY_SCHEMA: dict[str, Any] = {
    "type": "boolean",
    "description": "Write generated files into the project",
    "default": True,
}


def tool_definitions() -> list[types.Tool]:
    """The four tools this server offers."""
    return [
        types.Tool(
            name="generate_postgresql_integration",
            description=(
                "Generate a complete PostgreSQL integration (entities, repositories, "
                "services, controllers, configuration) and apply it to the project."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "description": {"type": "string", "description": "What the integration is for"},
                    "schema": _SCHEMA_SCHEMA,
                    "projectPath": _PROJECT_PATH_SCHEMA,
                    "preferences": _PREFERENCES_SCHEMA,
                    "applyToProject": _APPLY_SCHEMA,
                },
                "required": ["description", "schema"],
            },
        ),
        types.Tool(
            name="get_postgresql_integration_status",
            description="Report which PostgreSQL integration components a project already has.",
            inputSchema={
                "type": "object",
                "properties": {"projectPath": _PROJECT_PATH_SCHEMA},
            },
        ),
        types.Tool(
            name="create_postgresql_integration_plan",
            description="Analyse the project and create an integration plan without generating code.",
            inputSchema={
                "type": "object",
                "properties": {
                    "description": {"type": "string", "description": "What the integration is for"},
                    "projectPath": _PROJECT_PATH_SCHEMA,
                    "preferences": _PREFERENCES_SCHEMA,
                },
                "required": ["description"],
            },
        ),
        types.Tool(
            name="execute_postgresql_integration",
            description="Execute a previously created plan and apply the generated files.",
            inputSchema={
                "type": "object",
                "properties": {
                    "planId": {"type": "string", "description": "Plan ID returned by the plan tool"},
                    "schema": _SCHEMA_SCHEMA,
                    "projectPath": _PROJECT_PATH_SCHEMA,
                    "preferences": _PREFERENCES_SCHEMA,
                    "applyToProject": _APPLY_SCHEMA,
                },
                "required": ["planId", "schema"],
            },
        ),
    ]


# ═══════════════════════════════════════════════════════════════════
#  Server
# ═══════════════════════════════════════════════════════════════════


class BridgeServer:
    """MCP server bound to one configuration.

    Args:
        config: Resolved bridge configuration.
        client: Optional generation client (tests inject a fake).
    """

    def __init__(self, config: BridgeConfig, client: Any = None) -> None:
        self.config = config
        self.client = client
        self.server = Server(SERVER_NAME)
        self._handlers: dict[str, tuple[type[BaseModel], Callable[[Any], str]]] = {
            "generate_postgresql_integration": (
                GenerateArgs,
                lambda a: generate.generate_integration(self.config, a, self.client),
            ),
            "get_postgresql_integration_status": (
                StatusArgs,
                lambda a: status_report(self.config, a),
            ),
            "create_postgresql_integration_plan": (
                PlanArgs,
                lambda a: generate.create_plan(self.config, a, self.client),
            ),
            "execute_postgresql_integration": (
                ExecuteArgs,
                lambda a: generate.execute_plan(self.config, a, self.client),
            ),
        }
        self.server.list_tools()(self.list_tools)
        self.server.call_tool()(self.call_tool)

    @property
    def tool_names(self) -> list[str]:
        return list(self._handlers)

    async def list_tools(self) -> list[types.Tool]:
        return tool_definitions()

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> list[types.TextContent]:
        text = await asyncio.to_thread(self.dispatch, name, arguments or {})
        return [types.TextContent(type="text", text=text)]

    def dispatch(self, name: str, arguments: dict[str, Any]) -> str:
        """Validate arguments and run one tool synchronously.

        Raises:
            ToolFailure: Unknown tool, bad arguments, or a ``BridgeError``
                from the use case (message prefixed with the error's label).
        """
        entry = self._handlers.get(name)
        if entry is None:
            raise ToolFailure(f"Unknown tool: {name}")
        args_model, handler = entry

        try:
            args = args_model.model_validate(arguments)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or '(root)'}: {err['msg']}"
                for err in e.errors()
            )
            raise ToolFailure(f"Invalid arguments for {name}: {problems}") from e

        logger.info("🔧 Tool call: %s", name)
        try:
            return handler(args)
        except BridgeError as e:
            logger.error("❌ %s failed: %s: %s", name, e.label, e)
            raise ToolFailure(f"{e.label}: {e}") from e

    def initialization_options(self) -> InitializationOptions:
        return InitializationOptions(
            server_name=SERVER_NAME,
            server_version=__version__,
            capabilities=self.server.get_capabilities(
                notification_options=NotificationOptions(),
                experimental_capabilities={},
            ),
        )

    async def run(self) -> None:
        """Serve on stdio until the client closes the stream."""
        logger.info("🚀 %s MCP server listening on stdio", SERVER_NAME)
        async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
            await self.server.run(read_stream, write_stream, self.initialization_options())


def run_server(config: BridgeConfig) -> None:
    """Blocking entry point used by ``pgbridge serve``."""
    try:
        asyncio.run(BridgeServer(config).run())
    except KeyboardInterrupt:
        logger.info("Shutting down MCP server")
