"""Application entry point for the SmartShoot game server."""

from __future__ import annotations

import random

from smartshoot_app.core.catalog_cache import CatalogCache
from smartshoot_app.core.game_manager import GameManager
from smartshoot_app.core.services.repositories import (
    InMemoryAdminSettingsRepository,
    InMemoryCatalogRepository,
    InMemoryLeaderboardRepository,
)
from smartshoot_app.data.demo_data import demo_questions, demo_rounds
from smartshoot_app.server.api_server import run_api_server
from smartshoot_app.utils.logging_config import configure_logging
from smartshoot_app.utils.settings import load_settings


def build_game_manager() -> GameManager:
    """Wire repositories, cache and settings into a ready-to-serve manager."""
    settings = load_settings()
    cache = CatalogCache(settings.cache_path) if settings.cache_path else None
    cached = cache.load() if cache else None

    if cached and (cached.rounds or cached.questions):
        catalog_repository = InMemoryCatalogRepository(cached.rounds, cached.questions)
    elif settings.seed_demo_data:
        catalog_repository = InMemoryCatalogRepository(demo_rounds(), demo_questions())
    else:
        catalog_repository = InMemoryCatalogRepository()
    leaderboard_repository = InMemoryLeaderboardRepository(cached.leaderboard if cached else None)
    settings_repository = (
        InMemoryAdminSettingsRepository(cached.admin_pin)
        if cached and cached.admin_pin
        else InMemoryAdminSettingsRepository()
    )

    manager = GameManager(
        catalog_repository=catalog_repository,
        leaderboard_repository=leaderboard_repository,
        settings_repository=settings_repository,
        cache=cache,
        rng=random.Random(settings.shuffle_seed),
    )
    manager.initialize_data()
    return manager


def main() -> None:
    """Initialize logging, load the catalogs, and serve the game API."""
    settings = load_settings()
    logger = configure_logging(settings.log_level)
    logger.info("Starting SmartShoot game server…")

    manager = build_game_manager()
    try:
        run_api_server(manager, host=settings.host, port=settings.port)
    finally:
        manager.shutdown()


if __name__ == "__main__":
    main()
