"""JSON snapshot of the repository-backed catalogs.

The cache only ever holds rounds, questions, the leaderboard and the admin
PIN. In-session state (player, drawn questions, outcomes) is never written, so
a restart always begins in the idle state.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from smartshoot_app.core.models import CatalogSnapshot

logger = logging.getLogger(__name__)

_SNAPSHOT_ADAPTER = TypeAdapter(CatalogSnapshot)


class CatalogCache:
    """Read-through cache stored as a single UTF-8 JSON document."""

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    @property
    def file_path(self) -> Path:
        return self._file_path

    def load(self) -> CatalogSnapshot:
        if not self._file_path.exists():
            return CatalogSnapshot()
        try:
            raw = self._file_path.read_bytes()
            return _SNAPSHOT_ADAPTER.validate_json(raw)
        except (OSError, ValidationError):
            logger.warning("Ignoring unreadable catalog cache at %s", self._file_path, exc_info=True)
            return CatalogSnapshot()

    def save(self, snapshot: CatalogSnapshot) -> None:
        file_path = self._file_path.resolve()
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(_SNAPSHOT_ADAPTER.dump_json(snapshot, indent=2))
