"""
数据模型定义
包含所有枚举类型、实体模型 (Pydantic) 和战斗结果 (Dataclass)
"""

from enum import Enum
from typing import List, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator
from dataclasses import dataclass, field
from .config import Config

# ============================================================================
# 枚举类型 (Enums)
# ============================================================================

class ChallengePolicy(str, Enum):
    """挑战出战策略"""
    RANDOM = "RANDOM"                 # 先去酒馆回复，再随机出战
    DETERMINISTIC = "DETERMINISTIC"   # 不回复，派出当前 HP 最高的宝可梦

class ArenaKind(str, Enum):
    """竞技场类型"""
    ARENA_1 = "ARENA_1"   # 100 场随机挑战，按等级/经验定胜负
    ARENA_2 = "ARENA_2"   # 最多 100 场确定性挑战，消耗战

class ArenaState(str, Enum):
    """竞技场运行状态"""
    PENDING = "PENDING"
    RUNNING = "RUNNING"
    STOPPED_EARLY = "STOPPED_EARLY"   # 消耗战中一方提前全灭
    COMPLETED = "COMPLETED"           # 所有回合打完

class FightOutcome(str, Enum):
    """单场战斗结束原因"""
    KNOCKOUT = "KNOCKOUT"       # 一方 HP 归零
    STALL = "STALL"             # 双方都没有可用招式
    SAFETY_CAP = "SAFETY_CAP"   # 达到回合安全上限，判平局

# ============================================================================
# 实体模型 (Entities) - Pydantic
# ============================================================================

class Attack(BaseModel):
    """招式"""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    name: str
    damage: int = Field(gt=0)
    usage_limit: int = Field(gt=0, alias="usageLimit")
    usage_count: int = Field(default=0, ge=0, alias="usageCount")

    @model_validator(mode='after')
    def check_usage(self) -> 'Attack':
        if self.usage_count > self.usage_limit:
            raise ValueError(
                f"usage_count ({self.usage_count}) 超过 usage_limit ({self.usage_limit})"
            )
        return self

    def can_use(self) -> bool:
        return self.usage_count < self.usage_limit

    def info(self) -> str:
        return f"{self.name} - 伤害: {self.damage}, 使用: {self.usage_count}/{self.usage_limit}"


class Pokemon(BaseModel):
    """宝可梦 (参战单位)"""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    name: str
    life_point: int = Field(ge=0, alias="lifePoint")
    max_life_point: int = Field(gt=0, alias="maxLifePoint")
    attacks: List[Attack] = Field(default_factory=list)

    @model_validator(mode='after')
    def check_invariants(self) -> 'Pokemon':
        """校验 HP 上限、招式数量上限与招式名唯一"""
        if self.life_point > self.max_life_point:
            raise ValueError(
                f"life_point ({self.life_point}) 超过 max_life_point ({self.max_life_point})"
            )
        if len(self.attacks) > Config.MAX_ATTACKS_PER_POKEMON:
            raise ValueError(f"最多 {Config.MAX_ATTACKS_PER_POKEMON} 个招式")
        names = [a.name for a in self.attacks]
        if len(names) != len(set(names)):
            raise ValueError("招式名重复")
        return self

    def is_ko(self) -> bool:
        """检查宝可梦是否失去战斗能力"""
        return self.life_point <= 0

    def is_alive(self) -> bool:
        return self.life_point > 0


class Trainer(BaseModel):
    """训练家"""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    name: str
    level: int = Field(default=Config.INITIAL_LEVEL, ge=1)
    experience: int = Field(default=0, ge=0, le=Config.EXPERIENCE_PER_LEVEL - 1)
    pokemons: List[Pokemon] = Field(default_factory=list)

    def summary(self) -> Dict[str, object]:
        return {"id": self.id, "name": self.name, "level": self.level, "experience": self.experience}

# ============================================================================
# 战斗结果 (Runtime Results) - Dataclass
# ============================================================================

@dataclass(frozen=True)
class TurnEvent:
    """单个回合的结构化记录 (用于统计分析)"""
    turn: int
    attacker: str
    defender: str
    attack_name: Optional[str]    # None 表示无可用招式
    damage: int
    defender_life_after: int

@dataclass
class FightResult:
    """宝可梦之间一场战斗的结果"""
    winner: Optional[Pokemon]
    loser: Optional[Pokemon]
    turns: int
    outcome: FightOutcome
    log: List[str] = field(default_factory=list)
    events: List[TurnEvent] = field(default_factory=list)

    @property
    def is_draw(self) -> bool:
        return self.winner is None

@dataclass
class ChallengeResult:
    """训练家之间一次挑战的结果

    winner/loser 为 None 表示这场战斗触发了回合上限，判为平局。
    """
    policy: ChallengePolicy
    winner: Optional[Trainer]
    loser: Optional[Trainer]
    rounds: int
    log: List[str] = field(default_factory=list)
    fighters: Dict[str, Optional[Pokemon]] = field(default_factory=dict)
    forfeit: bool = False
    fight: Optional[FightResult] = None

    @property
    def is_draw(self) -> bool:
        return self.winner is None

@dataclass
class ArenaResult:
    """竞技场的最终结果"""
    kind: ArenaKind
    state: ArenaState
    rounds_played: int
    wins: Dict[str, int]
    winner: Optional[Trainer]
    stopped: bool = False
    draws: int = 0
    void_rounds: int = 0
    log: List[str] = field(default_factory=list)
    challenges: List[ChallengeResult] = field(default_factory=list)
