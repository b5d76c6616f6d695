"""
异常定义
核心只抛出这里定义的异常，由外层 (API / 脚本) 决定如何呈现
"""


class PokeArenaError(Exception):
    """所有内部异常的基类"""


class ValidationError(PokeArenaError):
    """训练家无法派出可战斗的宝可梦 (空队伍或选中的宝可梦没有招式)"""


class InvalidRosterError(PokeArenaError):
    """学习招式违反规则 (超过上限或重名)"""


class AttackExhaustedError(PokeArenaError):
    def __init__(self, attack_name: str, usage_limit: int):
        super().__init__(f"招式 '{attack_name}' 已用尽 ({usage_limit}/{usage_limit})")
        self.attack_name = attack_name
        self.usage_limit = usage_limit


class TrainerNotFoundError(PokeArenaError):
    def __init__(self, trainer_id: int):
        super().__init__(f"训练家不存在: {trainer_id}")
        self.trainer_id = trainer_id
