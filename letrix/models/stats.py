"""
Stats Data Models

Contains the cumulative per-mode, per-language statistics record.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class GameStats:
    """Cumulative statistics for one mode and language."""
    histo: List[int] = field(default_factory=lambda: [0] * 6)
    curstreak: int = 0
    maxstreak: int = 0
    perfect_wins: int = 0
    current_perfect_streak: int = 0
    best_perfect_streak: int = 0
    games: int = 0
    wins: int = 0
    failed: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'histo': list(self.histo),
            'curstreak': self.curstreak,
            'maxstreak': self.maxstreak,
            'perfectWins': self.perfect_wins,
            'currentPerfectStreak': self.current_perfect_streak,
            'bestPerfectStreak': self.best_perfect_streak,
            'games': self.games,
            'wins': self.wins,
            'failed': self.failed,
        }
