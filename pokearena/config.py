"""
竞技场全局配置常量
存放所有硬编码的数值参数，便于后续调整规则
"""


class Config:
    """全局对战配置"""

    # ========== 宝可梦 ==========
    MAX_ATTACKS_PER_POKEMON = 4     # 每只宝可梦最多掌握的招式数

    # ========== 单场战斗 ==========
    FIGHT_TURN_CAP = 50             # 单场战斗的回合安全上限 (超出判平局)

    # ========== 竞技场 ==========
    ARENA_ROUNDS = 100              # 每个竞技场的最大挑战次数

    # ========== 经验与等级 ==========
    INITIAL_LEVEL = 1               # 训练家初始等级
    EXPERIENCE_PER_LEVEL = 10       # 升一级所需经验
    EXPERIENCE_PER_WIN = 1          # 随机挑战胜利获得的经验

    # ========== 外部接口 ==========
    API_LOG_TAIL = 50               # 竞技场接口只返回最后 N 行日志
    DEFAULT_DATA_FILE = "data/trainers.json"
