"""
combat 包初始化文件
"""

from .resolver import resolve_fight
from .challenge import (
    random_challenge, deterministic_challenge, resolve_challenge,
    select_random_fighter, select_strongest_fighter,
)
from .arena import ArenaRunner, run_arena
from .statistics_collector import StatisticsCollector

__all__ = [
    'resolve_fight',
    'random_challenge',
    'deterministic_challenge',
    'resolve_challenge',
    'select_random_fighter',
    'select_strongest_fighter',
    'ArenaRunner',
    'run_arena',
    'StatisticsCollector',
]
