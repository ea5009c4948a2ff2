"""
Status use case — probe a project and describe its integration state.
"""

from __future__ import annotations

import logging

from pgbridge.core.models.config import BridgeConfig
from pgbridge.core.models.generation import StatusArgs
from pgbridge.core.models.status import IntegrationStatus
from pgbridge.core.services.integration_status import check_integration_status
from pgbridge.core.services.project_paths import resolve_project_root
from pgbridge.core.use_cases.reports import format_status_report

logger = logging.getLogger(__name__)


def get_integration_status(config: BridgeConfig, project_path: str = ".") -> tuple[str, IntegrationStatus]:
    """Resolve the project root and run the probe.

    Returns:
        (resolved root as string, status)

    Raises:
        InvalidProjectPath: The path cannot be resolved to a directory.
    """
    root = resolve_project_root(project_path, ide_path=config.ide_project_path)
    logger.info("Checking integration status for: %s", root)
    return str(root), check_integration_status(root)


def status_report(config: BridgeConfig, args: StatusArgs) -> str:
    root, status = get_integration_status(config, args.project_path)
    return format_status_report(status, root)
