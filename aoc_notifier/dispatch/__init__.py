"""Dispatch orchestrator: one scheduled tick across all subscriptions.

Components:
- DispatchConfig: Delays, cache TTL, and retry settings
- RunOptions / DispatchResult / PassStats: Run inputs and summary
- NotificationDispatcher: Puzzle and leaderboard passes
"""

from aoc_notifier.dispatch.config import DispatchConfig
from aoc_notifier.dispatch.schemas import DispatchResult, PassStats, RunOptions
from aoc_notifier.dispatch.service import (
    LEADERBOARD_PASS,
    PUZZLE_PASS,
    NotificationDispatcher,
    build_dispatcher,
    send_direct,
)

__all__ = [
    "DispatchConfig",
    "DispatchResult",
    "LEADERBOARD_PASS",
    "NotificationDispatcher",
    "PUZZLE_PASS",
    "PassStats",
    "RunOptions",
    "build_dispatcher",
    "send_direct",
]
