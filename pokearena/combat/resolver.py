"""
战斗结算
两只宝可梦轮流出招直到一方倒下、双方僵持或达到回合上限
"""

import logging
import random
from typing import List, Optional

from ..config import Config
from ..models import Pokemon, FightResult, FightOutcome, TurnEvent
from ..mechanics import usable_attacks, use_attack, apply_damage

logger = logging.getLogger(__name__)


def resolve_fight(
    first: Pokemon,
    second: Pokemon,
    rng: Optional[random.Random] = None,
    turn_cap: int = Config.FIGHT_TURN_CAP,
) -> FightResult:
    """结算一场宝可梦对战，直接修改双方的 HP 与招式使用次数。

    战斗流程:
    1. first 先攻，之后每回合攻防互换
    2. 攻击方从可用招式 (usage_count < usage_limit) 中均匀随机选一个
    3. 没有可用招式时本回合空过，不产生任何修改
    4. 扣除防守方 HP (最低为 0)

    结束条件 (按检查顺序):
    - 击倒: 任一方 HP 归零
    - 僵持: 连续两个回合 (一攻一守的完整循环) 都没有出招，立即结束
    - 安全上限: 回合数达到 turn_cap，判平局

    胜负判定:
    - 击倒/僵持: HP > 0 的一方获胜; 双方同为 0 或同样存活时先攻方获胜
    - 安全上限: 无胜者

    Args:
        first: 先攻的宝可梦
        second: 后攻的宝可梦
        rng: 随机数源，None 时使用 random 模块
        turn_cap: 回合安全上限

    Returns:
        FightResult: 胜者、回合数、结束原因以及按顺序排列的战斗日志
    """
    rng = rng if rng is not None else random
    log: List[str] = [
        f"⚔️  战斗开始: {first.name} ({first.life_point} HP) vs {second.name} ({second.life_point} HP)"
    ]
    events: List[TurnEvent] = []

    attacker, defender = first, second
    turns = 0
    idle_streak = 0

    while True:
        if first.is_ko() or second.is_ko():
            outcome = FightOutcome.KNOCKOUT
            break
        if idle_streak >= 2:
            outcome = FightOutcome.STALL
            log.append("⏸️  双方都没有可用的招式，战斗结束")
            break
        if turns >= turn_cap:
            outcome = FightOutcome.SAFETY_CAP
            break

        turns += 1
        event = _execute_turn(attacker, defender, turns, rng, log)
        events.append(event)
        idle_streak = idle_streak + 1 if event.attack_name is None else 0

        attacker, defender = defender, attacker

    if outcome == FightOutcome.SAFETY_CAP:
        logger.warning(f"[Resolver] {first.name} vs {second.name} 达到 {turn_cap} 回合上限，判平局")
        log.append(f"🤝 达到 {turn_cap} 回合上限，平局!")
        return FightResult(winner=None, loser=None, turns=turns, outcome=outcome, log=log, events=events)

    if first.is_ko() and second.is_alive():
        winner, loser = second, first
    else:
        winner, loser = first, second

    reason = "击倒" if outcome == FightOutcome.KNOCKOUT else "僵持"
    log.append(f"🏆 胜者: {winner.name} ({reason})")
    logger.debug(f"[Resolver] {winner.name} 获胜 ({outcome.value}, {turns} 回合)")
    return FightResult(winner=winner, loser=loser, turns=turns, outcome=outcome, log=log, events=events)


def _execute_turn(
    attacker: Pokemon,
    defender: Pokemon,
    turn: int,
    rng,
    log: List[str],
) -> TurnEvent:
    """执行单个回合，返回本回合的结构化记录"""
    candidates = usable_attacks(attacker)
    if not candidates:
        log.append(f"第 {turn} 回合: {attacker.name} 没有可用的招式")
        logger.debug(f"[Resolver] 回合 {turn}: {attacker.name} 空过")
        return TurnEvent(
            turn=turn, attacker=attacker.name, defender=defender.name,
            attack_name=None, damage=0, defender_life_after=defender.life_point,
        )

    attack = rng.choice(candidates)
    use_attack(attack)
    dealt = apply_damage(defender, attack.damage)

    log.append(
        f"第 {turn} 回合: {attacker.name} 使用 【{attack.name}】 造成 {dealt} 伤害"
        f" -> {defender.name} 剩余 {defender.life_point}/{defender.max_life_point} HP"
    )
    if defender.is_ko():
        log.append(f"💀 {defender.name} 倒下了!")

    return TurnEvent(
        turn=turn, attacker=attacker.name, defender=defender.name,
        attack_name=attack.name, damage=dealt, defender_life_after=defender.life_point,
    )
