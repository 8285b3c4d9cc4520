"""
Level tier rules
Maps accumulated XP to progress within the profile's stored tier
"""
from typing import Dict

LEVEL_ORDER = ("rookie", "prospector", "closer", "elite")

# XP required to complete each tier
LEVEL_THRESHOLDS: Dict[str, int] = {
    "rookie": 1000,
    "prospector": 3000,
    "closer": 7000,
    "elite": 15000,
}

LEVEL_ICONS: Dict[str, str] = {
    "rookie": "🥉",
    "prospector": "🥈",
    "closer": "🥇",
    "elite": "💎",
}

DEFAULT_THRESHOLD = 1000


def is_valid_level(level: str) -> bool:
    return level in LEVEL_THRESHOLDS


def next_level_xp(level: str, thresholds: Dict[str, int] = LEVEL_THRESHOLDS) -> int:
    """XP that completes the given tier; unknown tiers use the rookie default"""
    return thresholds.get(level, DEFAULT_THRESHOLD)


def level_progress(xp: int, level: str, thresholds: Dict[str, int] = LEVEL_THRESHOLDS) -> float:
    """
    Percentage progress through the current tier

    The tier itself is stored on the profile and promoted by a manager,
    so it is an input here rather than something derived from xp.

    Returns:
        Value in [0, 100]
    """
    xp = max(xp or 0, 0)
    return min(100.0, 100.0 * xp / next_level_xp(level, thresholds))


def level_icon(level: str) -> str:
    return LEVEL_ICONS.get(level, LEVEL_ICONS["rookie"])
