"""
Stats Aggregator

Folds completed rounds into cumulative statistics. Called exactly once
per terminal round; counters only ever grow.
"""

from typing import Any, Mapping, Optional

from ..config.game_settings import MIN_HISTOGRAM_BUCKETS
from ..models.stats import GameStats

# Persisted key -> dataclass field
_COUNTER_FIELDS = {
    'curstreak': 'curstreak',
    'maxstreak': 'maxstreak',
    'perfectWins': 'perfect_wins',
    'currentPerfectStreak': 'current_perfect_streak',
    'bestPerfectStreak': 'best_perfect_streak',
    'games': 'games',
    'wins': 'wins',
    'failed': 'failed',
}


def _as_count(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return max(int(value), 0)


def normalize_stats(stored: Optional[Mapping[str, Any]], max_attempts: int) -> GameStats:
    """
    Build stats from a stored document, defaulting anything missing to zero.

    The histogram is padded to ``max(max_attempts, 6)`` buckets.
    """
    stored = stored if isinstance(stored, Mapping) else {}
    histo_length = max(max_attempts, MIN_HISTOGRAM_BUCKETS)

    source_histo = stored.get('histo')
    source_histo = source_histo if isinstance(source_histo, list) else []
    histo = [_as_count(source_histo[i]) if i < len(source_histo) else 0
             for i in range(max(histo_length, len(source_histo)))]

    stats = GameStats(histo=histo)
    for key, attribute in _COUNTER_FIELDS.items():
        setattr(stats, attribute, _as_count(stored.get(key)))
    return stats


def add_stats_for_completed_game(stats: GameStats, count: int, max_attempts: int,
                                 is_unlimited_mode: bool = False) -> GameStats:
    """
    Record one finished round.

    Args:
        stats: Current stats (not modified)
        count: Failed tries before the winning one, or ``max_attempts`` for a loss
        max_attempts: Mode's attempt limit
        is_unlimited_mode: Unlimited rounds are never failures

    Returns:
        GameStats: New stats with the round folded in
    """
    result = normalize_stats(stats.to_dict(), max_attempts)
    hist_index = max(0, count)
    is_failure = not is_unlimited_mode and count >= max_attempts
    is_perfect_win = not is_failure and count == 0

    if hist_index >= len(result.histo):
        result.histo.extend([0] * (hist_index - len(result.histo) + 1))

    result.games += 1

    if is_failure:
        result.curstreak = 0
        result.current_perfect_streak = 0
        result.failed += 1
        return result

    result.histo[hist_index] += 1
    result.curstreak += 1
    result.wins += 1
    result.maxstreak = max(result.maxstreak, result.curstreak)

    if is_perfect_win:
        result.perfect_wins += 1
        result.current_perfect_streak += 1
        result.best_perfect_streak = max(result.best_perfect_streak, result.current_perfect_streak)
    else:
        result.current_perfect_streak = 0

    return result


def get_success_rate(stats: GameStats) -> int:
    return round(100 * (stats.games - stats.failed) / max(stats.games, 1))
