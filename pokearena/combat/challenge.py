"""
训练家挑战
每个训练家按策略派出一只宝可梦，交给 resolver 结算，再处理经验奖励
"""

import logging
import random
from typing import Callable, Dict, List, Optional, Tuple

from ..config import Config
from ..errors import ValidationError
from ..models import Pokemon, Trainer, ChallengePolicy, ChallengeResult
from ..mechanics import alive_pokemons, heal_trainer, gain_experience
from .resolver import resolve_fight

logger = logging.getLogger(__name__)

FighterSelector = Callable[[Trainer], Pokemon]


# ============================================================================
# 出战选择
# ============================================================================

def select_random_fighter(trainer: Trainer, rng=None, healed: bool = False) -> Pokemon:
    """从未倒下的宝可梦中均匀随机选一只。

    Args:
        trainer: 训练家
        rng: 随机数源，None 时使用 random 模块
        healed: 按酒馆回复之后的队伍选择 (所有宝可梦都视为未倒下)

    Raises:
        ValidationError: 没有可出战的宝可梦，或选中的宝可梦没有任何招式
    """
    rng = rng if rng is not None else random
    candidates = list(trainer.pokemons) if healed else alive_pokemons(trainer)
    if not candidates:
        raise ValidationError(f"{trainer.name} 没有可出战的宝可梦")
    fighter = rng.choice(candidates)
    if not fighter.attacks:
        raise ValidationError(f"{trainer.name} 选中的 {fighter.name} 没有任何招式")
    return fighter


def select_strongest_fighter(trainer: Trainer) -> Pokemon:
    """选择当前 HP 最高的未倒下宝可梦，HP 相同时取队伍中靠前的一只。

    Raises:
        ValidationError: 没有可出战的宝可梦
    """
    candidates = alive_pokemons(trainer)
    if not candidates:
        raise ValidationError(f"{trainer.name} 没有可出战的宝可梦")
    # max 在相等时返回第一个
    return max(candidates, key=lambda p: p.life_point)


def _pick_fighters(
    trainer_a: Trainer,
    trainer_b: Trainer,
    selector: FighterSelector,
) -> Tuple[Dict[str, Optional[Pokemon]], Dict[str, ValidationError]]:
    """双方依次选择出战宝可梦，收集无法出战的原因"""
    fighters: Dict[str, Optional[Pokemon]] = {}
    failures: Dict[str, ValidationError] = {}
    for side, trainer in (("a", trainer_a), ("b", trainer_b)):
        try:
            fighters[side] = selector(trainer)
        except ValidationError as e:
            fighters[side] = None
            failures[side] = e

    if len(failures) == 2:
        raise ValidationError(
            f"双方都无法出战: {failures['a']}; {failures['b']}"
        )
    return fighters, failures


def _forfeit_result(
    policy: ChallengePolicy,
    trainer_a: Trainer,
    trainer_b: Trainer,
    fighters: Dict[str, Optional[Pokemon]],
    failures: Dict[str, ValidationError],
    log: List[str],
) -> ChallengeResult:
    """一方无法出战时直接判负，不进行战斗"""
    if "a" in failures:
        winner, loser, reason = trainer_b, trainer_a, failures["a"]
    else:
        winner, loser, reason = trainer_a, trainer_b, failures["b"]

    log.append(f"❌ {reason}")
    log.append(f"🏆 {winner.name} 不战而胜")
    logger.warning(f"[Challenge] {loser.name} 弃权: {reason}")
    return ChallengeResult(
        policy=policy, winner=winner, loser=loser, rounds=0,
        log=log, fighters=fighters, forfeit=True,
    )


def _fight(
    policy: ChallengePolicy,
    trainer_a: Trainer,
    trainer_b: Trainer,
    fighters: Dict[str, Optional[Pokemon]],
    log: List[str],
    rng,
    turn_cap: int,
) -> ChallengeResult:
    fight = resolve_fight(fighters["a"], fighters["b"], rng=rng, turn_cap=turn_cap)
    log.extend(fight.log)

    if fight.is_draw:
        log.append(f"🤝 {trainer_a.name} 与 {trainer_b.name} 战平")
        return ChallengeResult(
            policy=policy, winner=None, loser=None, rounds=fight.turns,
            log=log, fighters=fighters, fight=fight,
        )

    if fight.winner is fighters["a"]:
        winner, loser = trainer_a, trainer_b
    else:
        winner, loser = trainer_b, trainer_a

    return ChallengeResult(
        policy=policy, winner=winner, loser=loser, rounds=fight.turns,
        log=log, fighters=fighters, fight=fight,
    )


# ============================================================================
# 挑战入口
# ============================================================================

def random_challenge(
    trainer_a: Trainer,
    trainer_b: Trainer,
    rng: Optional[random.Random] = None,
    turn_cap: int = Config.FIGHT_TURN_CAP,
) -> ChallengeResult:
    """随机挑战。

    流程:
    1. 双方各从回复后的队伍中随机选出一只宝可梦
    2. 双方前往酒馆，所有宝可梦回满 HP、招式次数清零
    3. 一方无法出战 (空队伍/选中的宝可梦没有招式) 时直接判负，回合数为 0
    4. 战斗结算后胜者获得 1 点经验，败者不受影响

    Raises:
        ValidationError: 双方都无法出战。在回复之前抛出，不修改任何状态
    """
    rng = rng if rng is not None else random
    # 先按回复后的队伍选人，双方都无法出战时不修改任何状态
    fighters, failures = _pick_fighters(
        trainer_a, trainer_b, lambda t: select_random_fighter(t, rng, healed=True)
    )

    log: List[str] = []
    heal_trainer(trainer_a)
    heal_trainer(trainer_b)
    log.append(f"🍺 {trainer_a.name} 和 {trainer_b.name} 前往酒馆回复")
    if failures:
        return _forfeit_result(ChallengePolicy.RANDOM, trainer_a, trainer_b, fighters, failures, log)

    log.append(f"{trainer_a.name} 派出 {fighters['a'].name}")
    log.append(f"{trainer_b.name} 派出 {fighters['b'].name}")

    result = _fight(ChallengePolicy.RANDOM, trainer_a, trainer_b, fighters, log, rng, turn_cap)

    if result.winner is not None:
        gain_experience(result.winner, Config.EXPERIENCE_PER_WIN)
        log.append(
            f"✨ {result.winner.name} 获得 {Config.EXPERIENCE_PER_WIN} 点经验 "
            f"(等级 {result.winner.level}, 经验 {result.winner.experience})"
        )

    logger.info(
        f"[Challenge] 随机挑战结束: "
        f"{result.winner.name if result.winner else '平局'} ({result.rounds} 回合)"
    )
    return result


def deterministic_challenge(
    trainer_a: Trainer,
    trainer_b: Trainer,
    rng: Optional[random.Random] = None,
    turn_cap: int = Config.FIGHT_TURN_CAP,
) -> ChallengeResult:
    """确定性挑战。

    不回复，双方各派出当前 HP 最高的宝可梦。没有可出战宝可梦的一方直接判负。
    不发放经验。出招仍然在可用招式中随机选择，所以需要 rng。

    Raises:
        ValidationError: 双方都没有可出战的宝可梦
    """
    rng = rng if rng is not None else random
    log: List[str] = []

    fighters, failures = _pick_fighters(trainer_a, trainer_b, select_strongest_fighter)
    if failures:
        return _forfeit_result(ChallengePolicy.DETERMINISTIC, trainer_a, trainer_b, fighters, failures, log)

    log.append(f"{trainer_a.name} 派出 {fighters['a'].name} ({fighters['a'].life_point} HP)")
    log.append(f"{trainer_b.name} 派出 {fighters['b'].name} ({fighters['b'].life_point} HP)")

    result = _fight(ChallengePolicy.DETERMINISTIC, trainer_a, trainer_b, fighters, log, rng, turn_cap)
    logger.info(
        f"[Challenge] 确定性挑战结束: "
        f"{result.winner.name if result.winner else '平局'} ({result.rounds} 回合)"
    )
    return result


def resolve_challenge(
    trainer_a: Trainer,
    trainer_b: Trainer,
    policy: ChallengePolicy,
    rng: Optional[random.Random] = None,
    turn_cap: int = Config.FIGHT_TURN_CAP,
) -> ChallengeResult:
    """按策略进行一次挑战"""
    if policy == ChallengePolicy.RANDOM:
        return random_challenge(trainer_a, trainer_b, rng=rng, turn_cap=turn_cap)
    if policy == ChallengePolicy.DETERMINISTIC:
        return deterministic_challenge(trainer_a, trainer_b, rng=rng, turn_cap=turn_cap)
    raise ValueError(f"未知的挑战策略: {policy}")
