"""
pokearena 包初始化文件
"""

from .config import Config
from .models import (
    Attack, Pokemon, Trainer,
    ChallengePolicy, ArenaKind, ArenaState, FightOutcome,
    FightResult, ChallengeResult, ArenaResult,
)
from .errors import PokeArenaError, ValidationError
from .repository import TrainerRepository

__all__ = [
    'Config',
    'Attack',
    'Pokemon',
    'Trainer',
    'ChallengePolicy',
    'ArenaKind',
    'ArenaState',
    'FightOutcome',
    'FightResult',
    'ChallengeResult',
    'ArenaResult',
    'PokeArenaError',
    'ValidationError',
    'TrainerRepository',
]
