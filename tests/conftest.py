"""
pytest 共享配置和 Fixtures
这个文件会被 pytest 自动加载，所有测试都可以使用这里定义的 fixtures
"""

import sys
import random
from pathlib import Path
import pytest  # pytest fixture 装饰器需要

# 确保 pokearena 模块能被导入
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# ============================================================================
# 导入项目模块
# ============================================================================
from pokearena.models import Attack, Pokemon, Trainer

# ============================================================================
# 构造辅助函数
# ============================================================================

def make_attack(name="Charge", damage=10, usage_limit=10, usage_count=0):
    return Attack(name=name, damage=damage, usage_limit=usage_limit, usage_count=usage_count)


def make_pokemon(name="Pikachu", life=100, max_life=None, attacks=None):
    """构造宝可梦，attacks 为 None 时给一个默认招式"""
    if attacks is None:
        attacks = [make_attack()]
    return Pokemon(
        name=name, life_point=life,
        max_life_point=max_life if max_life is not None else life,
        attacks=attacks,
    )


def make_trainer(name="Sacha", pokemons=None, level=1, experience=0):
    return Trainer(name=name, level=level, experience=experience, pokemons=pokemons or [])

# ============================================================================
# 基础 Fixtures（测试数据）
# ============================================================================

@pytest.fixture
def rng():
    """固定种子的随机数源"""
    return random.Random(1234)


@pytest.fixture
def strong_pokemon():
    """100 HP，单招式 50 伤害 / 10 次"""
    return make_pokemon("Dracaufeu", 100, attacks=[make_attack("Lance-Flammes", 50, 10)])


@pytest.fixture
def weak_pokemon():
    """100 HP，单招式 40 伤害 / 10 次"""
    return make_pokemon("Carapuce", 100, attacks=[make_attack("Pistolet à O", 40, 10)])


@pytest.fixture
def ash():
    """两只宝可梦的训练家"""
    return make_trainer("Sacha", [
        make_pokemon("Pikachu", 100, attacks=[
            make_attack("Éclair", 40, 10),
            make_attack("Vive-Attaque", 25, 15),
        ]),
        make_pokemon("Bulbizarre", 120, attacks=[
            make_attack("Fouet Lianes", 35, 10),
        ]),
    ])


@pytest.fixture
def misty():
    return make_trainer("Ondine", [
        make_pokemon("Stari", 90, attacks=[
            make_attack("Pistolet à O", 40, 10),
            make_attack("Charge", 20, 20),
        ]),
        make_pokemon("Psykokwak", 110, attacks=[
            make_attack("Choc Mental", 45, 8),
        ]),
    ])


@pytest.fixture
def empty_trainer():
    """没有任何宝可梦的训练家"""
    return make_trainer("Pierre", [])
