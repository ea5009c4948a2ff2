"""
Domain models — Pydantic types for the bridge.

All models are re-exported here for convenient access:

    from pgbridge.core.models import Category, FileChangeDescriptor, ApplyResult
"""

from pgbridge.core.models.changes import (
    ApplyResult,
    Category,
    FileAction,
    FileChangeDescriptor,
    MergeStrategy,
)
from pgbridge.core.models.config import BridgeConfig
from pgbridge.core.models.generation import (
    ExecuteArgs,
    ExecutionResponse,
    GenerateArgs,
    PlanArgs,
    PlanResponse,
    Preferences,
    StatusArgs,
)
from pgbridge.core.models.status import IntegrationComponents, IntegrationStatus

__all__ = [
    # changes.py
    "ApplyResult",
    "Category",
    "FileAction",
    "FileChangeDescriptor",
    "MergeStrategy",
    # config.py
    "BridgeConfig",
    # generation.py
    "ExecuteArgs",
    "ExecutionResponse",
    "GenerateArgs",
    "PlanArgs",
    "PlanResponse",
    "Preferences",
    "StatusArgs",
    # status.py
    "IntegrationComponents",
    "IntegrationStatus",
]
