"""
战斗统计收集器
====================
功能：从 FightResult / ChallengeResult / ArenaResult 中收集统计数据
设计原则：
  - 只读取结果，不干预战斗流程
  - 支持跨多场竞技场累计 (用于批量模拟)
"""

from dataclasses import dataclass, field
from typing import List
from collections import Counter
from ..models import FightResult, ChallengeResult, ArenaResult


@dataclass
class FightRecord:
    """单场战斗记录（用于详细分析）"""
    fight_id: int
    first: str
    second: str
    winner: str
    outcome: str
    turns: int
    total_damage: int


@dataclass
class SimulationStatistics:
    """累计统计数据"""
    fights: int = 0
    challenges: int = 0
    forfeits: int = 0
    arenas: int = 0

    # 回合统计
    total_turns: int = 0
    max_turns: int = 0
    min_turns: float = float('inf')
    idle_turns: int = 0

    # 伤害统计
    total_damage: int = 0
    damage_distribution: List[int] = field(default_factory=list)

    # 结果统计
    outcomes: Counter = field(default_factory=Counter)
    attack_usage: Counter = field(default_factory=Counter)
    damage_by_attack: Counter = field(default_factory=Counter)
    pokemon_wins: Counter = field(default_factory=Counter)
    arena_winners: Counter = field(default_factory=Counter)
    arena_states: Counter = field(default_factory=Counter)

    records: List[FightRecord] = field(default_factory=list)

    @property
    def average_turns(self) -> float:
        return self.total_turns / self.fights if self.fights else 0.0

    def finalize(self):
        if self.min_turns == float('inf'):
            self.min_turns = 0


class StatisticsCollector:
    """统计收集器

    按层级提供入口: on_arena -> on_challenge -> on_fight，
    上层入口会自动把下层结果交给下层入口处理。
    """

    def __init__(self, enable_detailed_records: bool = False):
        """初始化统计收集器

        Args:
            enable_detailed_records: 是否记录每场战斗的详细记录（批量模拟时内存消耗较大）
        """
        self.enable_detailed_records = enable_detailed_records
        self.stats = SimulationStatistics()

    def on_fight(self, fight: FightResult):
        """处理单场战斗结果（核心接口）"""
        self.stats.fights += 1
        self.stats.outcomes[fight.outcome.value] += 1
        self.stats.total_turns += fight.turns
        self.stats.max_turns = max(self.stats.max_turns, fight.turns)
        self.stats.min_turns = min(self.stats.min_turns, fight.turns)

        fight_damage = 0
        for event in fight.events:
            if event.attack_name is None:
                self.stats.idle_turns += 1
                continue
            self.stats.attack_usage[event.attack_name] += 1
            self.stats.damage_by_attack[event.attack_name] += event.damage
            self.stats.damage_distribution.append(event.damage)
            fight_damage += event.damage
        self.stats.total_damage += fight_damage

        if fight.winner is not None:
            self.stats.pokemon_wins[fight.winner.name] += 1

        if self.enable_detailed_records:
            first = fight.events[0].attacker if fight.events else ""
            second = fight.events[0].defender if fight.events else ""
            self.stats.records.append(FightRecord(
                fight_id=self.stats.fights,
                first=first,
                second=second,
                winner=fight.winner.name if fight.winner else "",
                outcome=fight.outcome.value,
                turns=fight.turns,
                total_damage=fight_damage,
            ))

    def on_challenge(self, result: ChallengeResult):
        self.stats.challenges += 1
        if result.forfeit:
            self.stats.forfeits += 1
        if result.fight is not None:
            self.on_fight(result.fight)

    def on_arena(self, result: ArenaResult):
        self.stats.arenas += 1
        self.stats.arena_winners[result.winner.name if result.winner else "平局"] += 1
        self.stats.arena_states[result.state.value] += 1
        for challenge in result.challenges:
            self.on_challenge(challenge)

    def finalize(self) -> SimulationStatistics:
        self.stats.finalize()
        return self.stats

    def get_statistics(self) -> SimulationStatistics:
        """获取当前统计数据（不结算）"""
        return self.stats

    def reset(self):
        """重置统计收集器（用于复用实例）"""
        self.stats = SimulationStatistics()
