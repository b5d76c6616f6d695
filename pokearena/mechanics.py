"""
实体状态变换
所有对 Attack / Pokemon / Trainer 的修改都通过这里的无状态函数完成，
模型本身只保存数据。
"""

from typing import List
from .config import Config
from .errors import AttackExhaustedError, InvalidRosterError
from .models import Attack, Pokemon, Trainer


# ============================================================================
# 招式 (Attack)
# ============================================================================

def use_attack(attack: Attack) -> None:
    """使用一次招式，计数 +1。

    Raises:
        AttackExhaustedError: 招式已达到使用上限
    """
    if not attack.can_use():
        raise AttackExhaustedError(attack.name, attack.usage_limit)
    attack.usage_count += 1


def reset_usage(attack: Attack) -> None:
    attack.usage_count = 0


# ============================================================================
# 宝可梦 (Pokemon)
# ============================================================================

def usable_attacks(pokemon: Pokemon) -> List[Attack]:
    """返回仍可使用的招式 (保持原有顺序)"""
    return [a for a in pokemon.attacks if a.can_use()]


def apply_damage(pokemon: Pokemon, amount: int) -> int:
    """对宝可梦造成伤害，HP 最低为 0。

    Args:
        pokemon: 受到伤害的宝可梦
        amount: 伤害值 (负数视为 0)

    Returns:
        int: 实际扣除的 HP
    """
    before = pokemon.life_point
    pokemon.life_point = max(0, pokemon.life_point - max(0, amount))
    return before - pokemon.life_point


def heal(pokemon: Pokemon) -> None:
    """酒馆回复: HP 回满并重置所有招式的使用次数 (幂等)"""
    pokemon.life_point = pokemon.max_life_point
    for attack in pokemon.attacks:
        reset_usage(attack)


def learn_attack(pokemon: Pokemon, attack: Attack) -> None:
    """让宝可梦学会新招式。

    Raises:
        InvalidRosterError: 招式数量已满或同名招式已存在
    """
    if len(pokemon.attacks) >= Config.MAX_ATTACKS_PER_POKEMON:
        raise InvalidRosterError(
            f"{pokemon.name} 最多只能掌握 {Config.MAX_ATTACKS_PER_POKEMON} 个招式"
        )
    if any(a.name == attack.name for a in pokemon.attacks):
        raise InvalidRosterError(f"{pokemon.name} 已经学会了 {attack.name}")
    pokemon.attacks.append(attack)


# ============================================================================
# 训练家 (Trainer)
# ============================================================================

def heal_trainer(trainer: Trainer) -> None:
    for pokemon in trainer.pokemons:
        heal(pokemon)


def alive_pokemons(trainer: Trainer) -> List[Pokemon]:
    return [p for p in trainer.pokemons if p.is_alive()]


def alive_count(trainer: Trainer) -> int:
    return len(alive_pokemons(trainer))


def has_lost(trainer: Trainer) -> bool:
    """训练家是否已无可战斗的宝可梦 (空队伍也视为已输)"""
    return alive_count(trainer) == 0


def gain_experience(trainer: Trainer, amount: int) -> int:
    """增加经验并处理升级。

    规则: experience += amount; 当 experience >= 10 时 level += 1, experience -= 10。
    一次获得大量经验可以连续升级多次，结束后始终满足 0 <= experience < 10。

    Args:
        trainer: 获得经验的训练家
        amount: 经验值 (不能为负)

    Returns:
        int: 本次提升的等级数
    """
    if amount < 0:
        raise ValueError(f"经验值不能为负: {amount}")

    trainer.experience += amount
    levels_gained = 0
    while trainer.experience >= Config.EXPERIENCE_PER_LEVEL:
        trainer.level += 1
        trainer.experience -= Config.EXPERIENCE_PER_LEVEL
        levels_gained += 1
    return levels_gained
