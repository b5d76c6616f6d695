import sys
import io
import logging
import random

# Windows UTF-8 兼容性处理
if sys.platform.startswith('win'):
    # type: ignore (针对特定平台的重写)
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8')

from pokearena import Config, ArenaKind, PokeArenaError, TrainerRepository
from pokearena.combat import run_arena


def main() -> int:
    """主函数"""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 80)
    print("宝可梦竞技场模拟器")
    print("=" * 80)
    print()

    # 1. 初始化训练家仓库
    repo: TrainerRepository = TrainerRepository(Config.DEFAULT_DATA_FILE)

    try:
        # 2. 加载所有训练家 (只在内存中模拟，不写回文件)
        repo.load()
        trainers = repo.list()
        if len(trainers) < 2:
            print("❌ 错误: 至少需要两名训练家")
            return 1

        rng = random.Random(42)

        # 3. 竞技场 1 与竞技场 2 各自使用一份新的训练家副本
        for kind in (ArenaKind.ARENA_1, ArenaKind.ARENA_2):
            trainer_a = repo.get(trainers[0].id)
            trainer_b = repo.get(trainers[1].id)
            result = run_arena(trainer_a, trainer_b, kind, rng=rng)

            for line in result.log[-Config.API_LOG_TAIL:]:
                print(line)
            print()

        print("=" * 80)
        print("模拟器运行完毕")
        print("=" * 80)

    except FileNotFoundError as e:
        print(f"❌ 错误: {e}")
        print(f"请确保 {Config.DEFAULT_DATA_FILE} 存在")
        return 1

    except PokeArenaError as e:
        print(f"❌ 运行时错误: {e}")
        return 1

    return 0


if __name__ == "__main__":
    exit_code: int = main()
    sys.exit(exit_code)
