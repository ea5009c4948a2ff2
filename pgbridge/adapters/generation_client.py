"""
Generation service client — the remote planner / code generator.

Three endpoints, JSON in and out:

    GET  /health          → {"status": "UP"}
    POST /plan/create     → PlanResponse
    POST /plan/execute    → ExecutionResponse

Failures are split in two so callers can tell them apart:

    ConnectivityError    nothing answered (refused, DNS, timeout)
    RemoteServiceError   the service answered and said no
"""

from __future__ import annotations

import json
import logging
import socket
import urllib.error
import urllib.request
from typing import Any

from pydantic import ValidationError

from pgbridge import __version__
from pgbridge.core.errors import ConnectivityError, RemoteServiceError
from pgbridge.core.models.config import BridgeConfig
from pgbridge.core.models.generation import ExecutionResponse, PlanResponse, Preferences

logger = logging.getLogger(__name__)

CAPABILITY = "postgresql"


class GenerationClient:
    """Thin REST client for the generation service.

    Args:
        base_url: Service base URL (e.g. ``http://localhost:8080/mcp``).
        timeout: Request timeout in seconds.
    """

    def __init__(self, base_url: str, timeout: float = 30.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: BridgeConfig) -> GenerationClient:
        return cls(config.mcp_server_url, timeout=config.timeout_seconds)

    # ── Endpoints ───────────────────────────────────────────────

    def health(self) -> dict[str, Any]:
        """Raw health payload."""
        return self._request("GET", "/health")

    def check_connection(self) -> None:
        """Raise unless the service reports ``status == "UP"``."""
        try:
            data = self.health()
        except RemoteServiceError as e:
            raise ConnectivityError(f"Health check failed at {self.base_url}: {e}") from e
        if data.get("status") != "UP":
            raise ConnectivityError(
                f"Health check failed at {self.base_url}: status={data.get('status')!r}"
            )
        logger.info("✅ Connection to generation service verified (%s)", self.base_url)

    def create_plan(
        self,
        project_path: str,
        description: str,
        preferences: Preferences | None = None,
    ) -> PlanResponse:
        payload = {
            "action": "create_plan",
            "capability": CAPABILITY,
            "projectInfo": {"path": project_path, "description": description},
            "preferences": (preferences or Preferences()).to_wire(),
        }
        data = self._request("POST", "/plan/create", payload)
        try:
            return PlanResponse.model_validate(data)
        except ValidationError as e:
            raise RemoteServiceError(f"Malformed plan response: {e.error_count()} error(s)") from e

    def execute_plan(
        self,
        plan_id: str,
        schema: dict[str, Any],
        *,
        generate_tests: bool = False,
    ) -> ExecutionResponse:
        payload = {
            "action": "execute_plan",
            "planId": plan_id,
            "schema": schema,
            "options": {"generateTests": generate_tests},
        }
        data = self._request("POST", "/plan/execute", payload)
        try:
            response = ExecutionResponse.model_validate(data)
        except ValidationError as e:
            raise RemoteServiceError(
                f"Malformed execution response: {e.error_count()} error(s)"
            ) from e

        if response.status == "error":
            message = (response.error or {}).get("message") or "Unknown error"
            raise RemoteServiceError(f"Plan execution failed: {message}")
        return response

    # ── Transport ───────────────────────────────────────────────

    def _request(
        self,
        method: str,
        endpoint: str,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        url = f"{self.base_url}{endpoint}"
        data = json.dumps(body).encode("utf-8") if body is not None else None
        req = urllib.request.Request(
            url,
            data=data,
            method=method,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
                "User-Agent": f"pgbridge/{__version__}",
            },
        )

        logger.debug("Making %s request to: %s", method, url)

        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                raw = resp.read().decode("utf-8")
        except urllib.error.HTTPError as e:
            logger.error("Request failed: HTTP %s %s", e.code, e.reason)
            raise RemoteServiceError(f"HTTP {e.code}: {e.reason}", status=e.code) from e
        except urllib.error.URLError as e:
            logger.error("Request failed: %s", e.reason)
            raise ConnectivityError(f"Cannot connect to {self.base_url}: {e.reason}") from e
        except (TimeoutError, socket.timeout) as e:
            logger.error("Request timed out after %.1fs: %s", self.timeout, url)
            raise ConnectivityError(
                f"Request to {url} timed out after {self.timeout:.0f}s"
            ) from e
        except OSError as e:
            logger.error("Request failed: %s", e)
            raise ConnectivityError(f"Cannot connect to {self.base_url}: {e}") from e

        try:
            payload = json.loads(raw) if raw.strip() else {}
        except json.JSONDecodeError as e:
            raise RemoteServiceError(f"Invalid JSON from {endpoint}: {e}") from e

        if not isinstance(payload, dict):
            raise RemoteServiceError(f"Expected a JSON object from {endpoint}")

        error = payload.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise RemoteServiceError(message or "Unknown server error")

        return payload
