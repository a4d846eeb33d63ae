"""Shared schema repository instance used by the REST and MCP routes."""

from __future__ import annotations

import logging

from schema_bridge.config import get_settings
from schema_bridge.services.schema_repository import InMemorySchemaRepository, load_snapshot_file

logger = logging.getLogger(__name__)

_repository: InMemorySchemaRepository | None = None


def get_schema_repository() -> InMemorySchemaRepository:
    """Get or create the process-wide schema repository."""
    global _repository
    if _repository is None:
        settings = get_settings()
        repository = InMemorySchemaRepository()
        if settings.schema_snapshot_path:
            repository.replace(load_snapshot_file(settings.schema_snapshot_path))
        else:
            logger.info("No SCHEMA_SNAPSHOT_PATH configured; starting with an empty schema")
        _repository = repository
    return _repository


def reset_schema_repository() -> None:
    global _repository
    _repository = None
