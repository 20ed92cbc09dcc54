"""Stage catalog repository adapters."""

from app.adapters.outbound.stage_catalog.in_memory_stage_catalog_repository import (
    InMemoryStageCatalogRepository,
)
from app.adapters.outbound.stage_catalog.postgres_stage_catalog_repository import (
    PostgresStageCatalogRepository,
)

__all__ = [
    "InMemoryStageCatalogRepository",
    "PostgresStageCatalogRepository",
]
