"""
训练家仓库 (Repository)
负责从 JSON 文件读取训练家聚合 (训练家 + 宝可梦 + 招式使用次数)，
并在模拟结束后写回修改后的状态
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from .errors import TrainerNotFoundError
from .models import Trainer

logger = logging.getLogger(__name__)


class TrainerRepository:
    """训练家仓库 - 战斗核心的外部协作者

    get() 返回的是深拷贝，核心对其所做的修改只有在 save() 之后才会生效。
    data_file 为 None 时仅保存在内存中。
    """

    def __init__(self, data_file: Optional[str] = None) -> None:
        """
        初始化训练家仓库

        Args:
            data_file: JSON 数据文件路径
        """
        self.data_file: Optional[Path] = Path(data_file) if data_file else None
        self.trainers: Dict[int, Trainer] = {}

    def load(self) -> None:
        """从 JSON 文件加载所有训练家"""
        if self.data_file is None:
            return
        if not self.data_file.exists():
            raise FileNotFoundError(f"训练家数据文件不存在: {self.data_file}")

        with open(self.data_file, 'r', encoding='utf-8') as f:
            raw_data = json.load(f)

        self.trainers.clear()
        for item in raw_data:
            try:
                trainer = Trainer.model_validate(item)
            except Exception:
                logger.error(f"[Repository] 加载 {self.data_file} 中的训练家失败: {item.get('name', 'unknown')}")
                raise
            self._store(trainer)
        logger.info(f"[Repository] 已加载 {len(self.trainers)} 名训练家")

    # ============= 读取 =============

    def get(self, trainer_id: int) -> Trainer:
        if trainer_id not in self.trainers:
            raise TrainerNotFoundError(trainer_id)
        return self.trainers[trainer_id].model_copy(deep=True)

    def list(self) -> List[Trainer]:
        return [self.trainers[tid].model_copy(deep=True) for tid in sorted(self.trainers)]

    # ============= 写入 =============

    def add(self, trainer: Trainer) -> Trainer:
        """新增训练家，没有 id 时自动分配"""
        stored = self._store(trainer.model_copy(deep=True))
        self._flush()
        return stored.model_copy(deep=True)

    def save(self, trainer: Trainer) -> None:
        """持久化模拟后的训练家状态"""
        if trainer.id is None or trainer.id not in self.trainers:
            raise TrainerNotFoundError(trainer.id)
        self.trainers[trainer.id] = trainer.model_copy(deep=True)
        self._flush()

    def save_all(self, *trainers: Trainer) -> None:
        for trainer in trainers:
            if trainer.id is None or trainer.id not in self.trainers:
                raise TrainerNotFoundError(trainer.id)
        for trainer in trainers:
            self.trainers[trainer.id] = trainer.model_copy(deep=True)
        self._flush()

    # ============= 内部方法 =============

    def _store(self, trainer: Trainer) -> Trainer:
        if trainer.id is None:
            trainer.id = max(self.trainers, default=0) + 1
        self.trainers[trainer.id] = trainer
        return trainer

    def _flush(self) -> None:
        if self.data_file is None:
            return
        payload = [
            self.trainers[tid].model_dump(mode='json', by_alias=True)
            for tid in sorted(self.trainers)
        ]
        self.data_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.data_file, 'w', encoding='utf-8') as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
