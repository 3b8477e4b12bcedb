"""Service for ranking completed players and summarizing results."""

from __future__ import annotations

from dataclasses import replace

from smartshoot_app.core.models import LeaderboardStats, Player


class Leaderboard:
    """In-memory leaderboard kept sorted by descending score.

    Python's sort is stable, but the order among equal scores is not part of
    the contract.
    """

    def __init__(self) -> None:
        self._entries: list[Player] = []

    def add(self, player: Player) -> None:
        self._entries.append(replace(player))
        self._entries.sort(key=lambda entry: entry.score, reverse=True)

    def load(self, players: list[Player]) -> None:
        self._entries = sorted((replace(p) for p in players), key=lambda entry: entry.score, reverse=True)

    def entries(self) -> list[Player]:
        return [replace(entry) for entry in self._entries]

    def top_for_round(self, round_id: str, limit: int) -> list[Player]:
        """Highest scores recorded for ``round_id``, best first."""
        return [replace(entry) for entry in self._entries if entry.round_id == round_id][:limit]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> LeaderboardStats:
        if not self._entries:
            return LeaderboardStats(total_games=0, average_score=0, highest_score=0, top_player=None)
        total = len(self._entries)
        scores = [entry.score for entry in self._entries]
        top = max(self._entries, key=lambda entry: entry.score)
        return LeaderboardStats(
            total_games=total,
            average_score=round(sum(scores) / total),
            highest_score=max(scores),
            top_player=top.name,
        )
