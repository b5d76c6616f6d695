"""
竞技场
在两名训练家之间重复进行挑战，统计胜场并按竞技场规则决出最终胜者
"""

import logging
import random
from typing import Dict, List, Optional

from ..config import Config
from ..errors import ValidationError
from ..models import Trainer, ArenaKind, ArenaState, ArenaResult, ChallengeResult
from ..mechanics import alive_count, has_lost
from .challenge import random_challenge, deterministic_challenge

logger = logging.getLogger(__name__)


class ArenaRunner:
    """竞技场主控

    状态流转: PENDING -> RUNNING(round_index) -> STOPPED_EARLY | COMPLETED
    进入终止状态后不会再进行任何回合，每个实例只能运行一次。
    """

    def __init__(
        self,
        trainer_a: Trainer,
        trainer_b: Trainer,
        kind: ArenaKind,
        rng: Optional[random.Random] = None,
        rounds: int = Config.ARENA_ROUNDS,
        turn_cap: int = Config.FIGHT_TURN_CAP,
    ) -> None:
        """初始化竞技场。

        Args:
            trainer_a: A 方训练家
            trainer_b: B 方训练家
            kind: 竞技场类型
            rng: 随机数源，None 时使用 random 模块
            rounds: 最大挑战次数
            turn_cap: 每场战斗的回合安全上限

        Raises:
            ValueError: 未知的竞技场类型
        """
        if kind not in (ArenaKind.ARENA_1, ArenaKind.ARENA_2):
            raise ValueError(f"未知的竞技场类型: {kind}")

        self.trainer_a: Trainer = trainer_a
        self.trainer_b: Trainer = trainer_b
        self.kind: ArenaKind = ArenaKind(kind)
        self.rng = rng if rng is not None else random
        self.max_rounds: int = rounds
        self.turn_cap: int = turn_cap

        self.state: ArenaState = ArenaState.PENDING
        self.round_index: int = 0
        self.wins: Dict[str, int] = {"a": 0, "b": 0}
        self.draws: int = 0
        self.void_rounds: int = 0
        self.stopped: bool = False
        self.battle_log: List[str] = []
        self.challenges: List[ChallengeResult] = []

    @property
    def is_finished(self) -> bool:
        return self.state in (ArenaState.STOPPED_EARLY, ArenaState.COMPLETED)

    def run(self) -> ArenaResult:
        """运行完整的竞技场流程并返回结果"""
        if self.state != ArenaState.PENDING:
            raise RuntimeError(f"竞技场已经运行过 (当前状态: {self.state.value})")

        self.state = ArenaState.RUNNING
        if self.kind == ArenaKind.ARENA_1:
            self._run_arena_1()
            winner = self._conclude_arena_1()
        else:
            self._run_arena_2()
            winner = self._conclude_arena_2()

        logger.info(
            f"[Arena] {self.kind.value} 结束: 状态={self.state.value} 回合={self.round_index} "
            f"比分={self.wins['a']}-{self.wins['b']} 胜者={winner.name if winner else '无'}"
        )
        return ArenaResult(
            kind=self.kind,
            state=self.state,
            rounds_played=self.round_index,
            wins=dict(self.wins),
            winner=winner,
            stopped=self.stopped,
            draws=self.draws,
            void_rounds=self.void_rounds,
            log=self.battle_log,
            challenges=self.challenges,
        )

    # ========================================================================
    # 竞技场 1: 随机挑战
    # ========================================================================

    def _run_arena_1(self) -> None:
        """进行 max_rounds 场独立的随机挑战，每场开始前都会回复"""
        self.battle_log.append(f"=== 竞技场 1: {self.max_rounds} 场随机挑战 ===")

        for i in range(1, self.max_rounds + 1):
            self.round_index = i
            self.battle_log.append(f"--- 第 {i}/{self.max_rounds} 场 ---")
            try:
                result = random_challenge(
                    self.trainer_a, self.trainer_b, rng=self.rng, turn_cap=self.turn_cap
                )
            except ValidationError as e:
                # 双方都无法出战: 本场作废，继续下一场
                self.void_rounds += 1
                self.battle_log.append(f"⚠️  本场作废: {e}")
                logger.warning(f"[Arena] 第 {i} 场作废: {e}")
                continue

            self._record(result)
            self._log_score()

        self.state = ArenaState.COMPLETED

    def _conclude_arena_1(self) -> Optional[Trainer]:
        """竞技场 1 胜负: 等级高者胜，其次经验高者胜，都相同则平局"""
        a, b = self.trainer_a, self.trainer_b
        if a.level != b.level:
            winner = a if a.level > b.level else b
        elif a.experience != b.experience:
            winner = a if a.experience > b.experience else b
        else:
            winner = None

        self.battle_log.append("=== 最终结果 ===")
        self.battle_log.append(
            f"{a.name}: 等级 {a.level}, 经验 {a.experience}, {self.wins['a']} 胜"
        )
        self.battle_log.append(
            f"{b.name}: 等级 {b.level}, 经验 {b.experience}, {self.wins['b']} 胜"
        )
        if winner is not None:
            self.battle_log.append(f"🏆 竞技场 1 胜者: {winner.name}")
        else:
            self.battle_log.append("🤝 等级与经验完全相同，平局!")
        return winner

    # ========================================================================
    # 竞技场 2: 消耗战
    # ========================================================================

    def _run_arena_2(self) -> None:
        """最多进行 max_rounds 场确定性挑战，伤害与招式消耗在整个竞技场中累积。

        每场开始前检查双方是否还有未倒下的宝可梦，一方全灭则立即停止。
        """
        self.battle_log.append(f"=== 竞技场 2: 最多 {self.max_rounds} 场确定性挑战 ===")

        for i in range(1, self.max_rounds + 1):
            depleted = self._depleted_trainer()
            if depleted is not None:
                self.battle_log.append(f"❌ {depleted.name} 已经没有可出战的宝可梦!")
                self.stopped = True
                self.state = ArenaState.STOPPED_EARLY
                return

            self.round_index = i
            self.battle_log.append(f"--- 第 {i}/{self.max_rounds} 场 ---")
            result = deterministic_challenge(
                self.trainer_a, self.trainer_b, rng=self.rng, turn_cap=self.turn_cap
            )
            self._record(result)
            self._log_score()
            self.battle_log.append(
                f"剩余宝可梦: {self.trainer_a.name} {alive_count(self.trainer_a)}, "
                f"{self.trainer_b.name} {alive_count(self.trainer_b)}"
            )

        self.state = ArenaState.COMPLETED

    def _depleted_trainer(self) -> Optional[Trainer]:
        if has_lost(self.trainer_a):
            return self.trainer_a
        if has_lost(self.trainer_b):
            return self.trainer_b
        return None

    def _conclude_arena_2(self) -> Optional[Trainer]:
        """竞技场 2 胜负: 全灭一方判负; 否则胜场多者胜，胜场相同则无胜者"""
        a, b = self.trainer_a, self.trainer_b
        depleted = self._depleted_trainer()
        if depleted is not None:
            winner = b if depleted is a else a
        elif self.wins["a"] != self.wins["b"]:
            winner = a if self.wins["a"] > self.wins["b"] else b
        else:
            winner = None

        self.battle_log.append("=== 最终结果 ===")
        self.battle_log.append(f"{a.name}: {self.wins['a']} 胜, 剩余 {alive_count(a)} 只宝可梦")
        self.battle_log.append(f"{b.name}: {self.wins['b']} 胜, 剩余 {alive_count(b)} 只宝可梦")
        if winner is not None:
            self.battle_log.append(f"🏆 竞技场 2 胜者: {winner.name}")
        else:
            self.battle_log.append("🤝 胜场相同，平局!")
        return winner

    # ========================================================================
    # 辅助方法
    # ========================================================================

    def _record(self, result: ChallengeResult) -> None:
        self.challenges.append(result)
        self.battle_log.extend(result.log)
        if result.is_draw:
            self.draws += 1
        elif result.winner is self.trainer_a:
            self.wins["a"] += 1
        else:
            self.wins["b"] += 1

    def _log_score(self) -> None:
        self.battle_log.append(
            f"比分: {self.trainer_a.name} {self.wins['a']} - {self.wins['b']} {self.trainer_b.name}"
        )


def run_arena(
    trainer_a: Trainer,
    trainer_b: Trainer,
    kind: ArenaKind,
    rng: Optional[random.Random] = None,
    rounds: int = Config.ARENA_ROUNDS,
    turn_cap: int = Config.FIGHT_TURN_CAP,
) -> ArenaResult:
    """运行一个竞技场并返回结果 (ArenaRunner 的便捷入口)"""
    runner = ArenaRunner(trainer_a, trainer_b, kind, rng=rng, rounds=rounds, turn_cap=turn_cap)
    return runner.run()
