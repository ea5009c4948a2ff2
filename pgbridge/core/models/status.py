"""
Integration status model — what the probe found in a project tree.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class IntegrationComponents(BaseModel):
    """Per-layer presence flags."""

    dependencies: bool = False
    configuration: bool = False
    entities: bool = False
    repositories: bool = False
    services: bool = False
    controllers: bool = False


class IntegrationStatus(BaseModel):
    """Derived, read-only view of a project's PostgreSQL integration.

    ``configured`` is true only when both the build dependencies and the
    datasource configuration are in place; the generated layers are
    reported separately.
    """

    configured: bool = False
    components: IntegrationComponents = Field(default_factory=IntegrationComponents)

    def missing(self) -> list[str]:
        """Names of the components not yet present."""
        return [name for name, present in self.components.model_dump().items() if not present]
