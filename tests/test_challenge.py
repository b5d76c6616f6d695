"""
单元测试: 训练家挑战
测试随机挑战 (酒馆回复 + 随机出战 + 经验) 与确定性挑战 (HP 最高者出战)
"""

import random
from unittest.mock import Mock

import pytest

from pokearena.errors import ValidationError
from pokearena.models import ChallengePolicy, FightOutcome
from pokearena.mechanics import apply_damage, use_attack
from pokearena.combat.challenge import (
    random_challenge, deterministic_challenge, resolve_challenge,
    select_random_fighter, select_strongest_fighter,
)
from conftest import make_attack, make_pokemon, make_trainer


def first_pick_rng():
    """总是选择第一个候选 (出战宝可梦与招式)"""
    rng = Mock()
    rng.choice.side_effect = lambda candidates: candidates[0]
    return rng


def tank_trainer(name):
    """打不死对方的训练家，用于制造回合上限平局"""
    return make_trainer(name, [make_pokemon(f"{name}-Tank", 1000, attacks=[make_attack("Picpic", 1, 1000)])])


# ============================================================================
# 出战选择
# ============================================================================

class TestFighterSelection:
    """出战选择测试"""

    def test_random_skips_ko(self, ash):
        apply_damage(ash.pokemons[0], 1000)
        rng = first_pick_rng()
        assert select_random_fighter(ash, rng) is ash.pokemons[1]
        assert rng.choice.call_args.args[0] == [ash.pokemons[1]]

    def test_random_empty_roster(self, empty_trainer):
        with pytest.raises(ValidationError):
            select_random_fighter(empty_trainer, random.Random(0))

    def test_random_without_attacks(self):
        trainer = make_trainer("Pierre", [make_pokemon("Onix", 100, attacks=[])])
        with pytest.raises(ValidationError, match="没有任何招式"):
            select_random_fighter(trainer, random.Random(0))

    def test_strongest_by_current_life(self, ash):
        assert select_strongest_fighter(ash).name == "Bulbizarre"
        apply_damage(ash.pokemons[1], 50)
        assert select_strongest_fighter(ash).name == "Pikachu"

    def test_strongest_tie_goes_to_first(self):
        first = make_pokemon("Premier", 80)
        second = make_pokemon("Second", 80)
        trainer = make_trainer(pokemons=[make_pokemon("Faible", 10), first, second])
        assert select_strongest_fighter(trainer) is first

    def test_strongest_ignores_ko(self):
        trainer = make_trainer(pokemons=[make_pokemon("KO", 0, max_life=200), make_pokemon("Vivant", 5)])
        assert select_strongest_fighter(trainer).name == "Vivant"


# ============================================================================
# 随机挑战
# ============================================================================

class TestRandomChallenge:
    """随机挑战测试"""

    def test_full_flow(self, ash, misty):
        """回复 -> 出战 -> 战斗 -> 胜者获得经验"""
        # 挑战前先制造伤害和招式消耗，应当被酒馆回复清除
        apply_damage(ash.pokemons[1], 115)
        use_attack(misty.pokemons[1].attacks[0])

        result = random_challenge(ash, misty, rng=first_pick_rng())

        assert result.policy == ChallengePolicy.RANDOM
        assert result.winner is ash
        assert result.loser is misty
        assert result.rounds == 5
        assert result.fighters["a"].name == "Pikachu"
        assert result.fighters["b"].name == "Stari"
        assert result.fight.outcome == FightOutcome.KNOCKOUT
        assert ash.pokemons[1].life_point == 120
        assert misty.pokemons[1].attacks[0].usage_count == 0
        assert (ash.level, ash.experience) == (1, 1)
        assert (misty.level, misty.experience) == (1, 0)

    def test_log_structure(self, ash, misty):
        result = random_challenge(ash, misty, rng=first_pick_rng())
        assert result.log[0] == "🍺 Sacha 和 Ondine 前往酒馆回复"
        assert result.log[1] == "Sacha 派出 Pikachu"
        assert result.log[2] == "Ondine 派出 Stari"
        assert result.log[-1] == "✨ Sacha 获得 1 点经验 (等级 1, 经验 1)"

    def test_empty_roster_forfeits(self, ash, empty_trainer):
        result = random_challenge(empty_trainer, ash, rng=random.Random(0))
        assert result.forfeit is True
        assert result.winner is ash
        assert result.loser is empty_trainer
        assert result.rounds == 0
        assert result.fight is None
        assert result.fighters["a"] is None

    def test_forfeit_awards_no_experience(self, ash, empty_trainer):
        random_challenge(ash, empty_trainer, rng=random.Random(0))
        assert ash.experience == 0

    def test_pokemon_without_attacks_forfeits(self, misty):
        trainer = make_trainer("Pierre", [make_pokemon("Onix", 100, attacks=[])])
        result = random_challenge(trainer, misty, rng=random.Random(0))
        assert result.forfeit is True
        assert result.winner is misty
        assert result.rounds == 0

    def test_both_empty_raises_without_mutation(self, empty_trainer):
        other = make_trainer("Régis", [])
        with pytest.raises(ValidationError):
            random_challenge(empty_trainer, other, rng=random.Random(0))

    def test_both_without_attacks_raises(self):
        a = make_trainer("A", [make_pokemon("Onix", 100, attacks=[])])
        b = make_trainer("B", [make_pokemon("Racaillou", 100, attacks=[])])
        with pytest.raises(ValidationError, match="双方都无法出战"):
            random_challenge(a, b, rng=random.Random(0))

    def test_both_without_attacks_leaves_state_untouched(self):
        """双方都无法出战时不会先去酒馆回复"""
        onix = make_pokemon("Onix", 40, max_life=100, attacks=[])
        racaillou = make_pokemon("Racaillou", 30, max_life=100, attacks=[])
        worn = make_attack("Charge", 10, 10, usage_count=7)
        spare = make_pokemon("Nosferapti", 20, max_life=80, attacks=[])
        a = make_trainer("A", [onix])
        b = make_trainer("B", [racaillou, spare])
        # 未上场的宝可梦的招式次数也不应被重置
        spare_with_attack = make_pokemon("Nosferalto", 10, max_life=90, attacks=[worn])
        a.pokemons.append(spare_with_attack)

        rng = first_pick_rng()
        with pytest.raises(ValidationError, match="双方都无法出战"):
            random_challenge(a, b, rng=rng)

        assert (onix.life_point, racaillou.life_point, spare.life_point) == (40, 30, 20)
        assert spare_with_attack.life_point == 10
        assert worn.usage_count == 7

    def test_random_pick_includes_ko_before_heal(self, ash, misty):
        """回复前已倒下的宝可梦也在随机候选中"""
        apply_damage(ash.pokemons[0], 1000)
        result = random_challenge(ash, misty, rng=first_pick_rng())
        assert result.fighters["a"].name == "Pikachu"
        assert ash.pokemons[0].life_point == 100

    def test_draw_awards_no_experience(self):
        a, b = tank_trainer("A"), tank_trainer("B")
        result = random_challenge(a, b, rng=random.Random(0))
        assert result.is_draw
        assert result.loser is None
        assert result.rounds == 50
        assert a.experience == 0 and b.experience == 0

    def test_ten_wins_level_up(self, misty):
        strong = make_trainer("Red", [make_pokemon("Mewtwo", 500, attacks=[make_attack("Psyko", 500, 5)])])
        for _ in range(10):
            random_challenge(strong, misty, rng=random.Random(0))
        assert (strong.level, strong.experience) == (2, 0)

    def test_same_seed_same_result(self, ash, misty):
        ash_copy, misty_copy = ash.model_copy(deep=True), misty.model_copy(deep=True)

        first = random_challenge(ash, misty, rng=random.Random(2024))
        second = random_challenge(ash_copy, misty_copy, rng=random.Random(2024))

        assert first.log == second.log
        assert first.winner.name == second.winner.name
        assert first.rounds == second.rounds


# ============================================================================
# 确定性挑战
# ============================================================================

class TestDeterministicChallenge:
    """确定性挑战测试"""

    def test_strongest_fighters_and_no_heal(self, ash, misty):
        apply_damage(ash.pokemons[1], 30)   # Bulbizarre 90 < Pikachu 100
        result = deterministic_challenge(ash, misty, rng=random.Random(0))

        assert result.policy == ChallengePolicy.DETERMINISTIC
        assert result.fighters["a"].name == "Pikachu"
        assert result.fighters["b"].name == "Psykokwak"
        assert result.log[0] == "Sacha 派出 Pikachu (100 HP)"
        assert result.log[1] == "Ondine 派出 Psykokwak (110 HP)"
        assert ash.pokemons[1].life_point == 90

    def test_no_experience(self, ash, misty):
        deterministic_challenge(ash, misty, rng=random.Random(0))
        assert ash.experience == 0 and misty.experience == 0

    def test_empty_roster_loses_immediately(self, ash, empty_trainer):
        result = deterministic_challenge(empty_trainer, ash, rng=random.Random(0))
        assert result.winner is ash
        assert result.rounds == 0
        assert result.forfeit is True

    def test_all_ko_loses(self, misty):
        beaten = make_trainer("Pierre", [make_pokemon("Onix", 0, max_life=100)])
        result = deterministic_challenge(misty, beaten, rng=random.Random(0))
        assert result.winner is misty
        assert result.loser is beaten
        assert result.rounds == 0

    def test_both_depleted_raises(self, empty_trainer):
        with pytest.raises(ValidationError):
            deterministic_challenge(empty_trainer, make_trainer("Régis"), rng=random.Random(0))

    def test_damage_persists(self, ash, misty):
        deterministic_challenge(ash, misty, rng=random.Random(3))
        fought = [p for p in ash.pokemons + misty.pokemons if p.life_point < p.max_life_point]
        assert fought


# ============================================================================
# 策略分发
# ============================================================================

class TestResolveChallenge:
    """策略分发测试"""

    def test_dispatch_random(self, ash, misty):
        result = resolve_challenge(ash, misty, ChallengePolicy.RANDOM, rng=random.Random(1))
        assert result.policy == ChallengePolicy.RANDOM

    def test_dispatch_deterministic(self, ash, misty):
        result = resolve_challenge(ash, misty, ChallengePolicy.DETERMINISTIC, rng=random.Random(1))
        assert result.policy == ChallengePolicy.DETERMINISTIC

    def test_unknown_policy(self, ash, misty):
        with pytest.raises(ValueError):
            resolve_challenge(ash, misty, "COIN_FLIP")
