"""Service container with DI wiring."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from later.controllers.filters_controller import SearchFiltersController
from later.controllers.search_controller import SearchController
from later.data.db import Database
from later.data.importer import ContentImporter
from later.data.search import SearchRepository
from later.services.search_service import SearchService

if TYPE_CHECKING:
    from later.config import Config


@dataclass
class ServiceContainer:
    """Holds all application services. Built once at startup, immutable."""

    config: Config
    db: Database
    importer: ContentImporter
    search_repository: SearchRepository
    search_service: SearchService

    @classmethod
    async def create(cls, config: Config) -> ServiceContainer:
        """Async factory that wires all dependencies."""
        db = Database(config.db_path)
        await db.__aenter__()

        search_repository = SearchRepository(
            db, user_id=config.user_id, default_limit=config.default_limit
        )
        search_service = SearchService(
            search_repository, max_query_length=config.max_query_length
        )

        return cls(
            config=config,
            db=db,
            importer=ContentImporter(db),
            search_repository=search_repository,
            search_service=search_service,
        )

    def new_search_controller(self) -> SearchController:
        """Create a controller for one search screen; dispose it when the screen closes."""
        return SearchController(self.search_service, debounce=self.config.debounce_seconds)

    def new_filters_controller(self) -> SearchFiltersController:
        return SearchFiltersController()

    async def close(self) -> None:
        """Shut down all services."""
        await self.db.__aexit__(None, None, None)
