from leaderboard_service.ranking import MAX_ENTRIES, rank, time_to_seconds
from leaderboard_service.store import LeaderboardStore

__all__ = ["MAX_ENTRIES", "LeaderboardStore", "rank", "time_to_seconds"]
