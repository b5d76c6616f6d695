"""
竞技场批量模拟
=================
对同一对训练家重复运行竞技场，统计胜负分布、回合数与招式使用情况。

使用方法：
    python sim_arena.py                          # 两种竞技场各运行 20 次
    python sim_arena.py --arena 2                # 只运行竞技场 2
    python sim_arena.py --iterations 200 --seed 7
"""

import sys
import os
import io
import random
import argparse

# 确保导入路径
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..')))

# Windows UTF-8 支持
if sys.platform.startswith('win'):
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')

from pokearena.config import Config
from pokearena.models import ArenaKind
from pokearena.repository import TrainerRepository
from pokearena.combat import run_arena, StatisticsCollector
from pokearena.combat.statistics_collector import SimulationStatistics

ARENAS = {
    1: ArenaKind.ARENA_1,
    2: ArenaKind.ARENA_2,
}


def run_simulation(
    repo: TrainerRepository,
    kind: ArenaKind,
    iterations: int,
    seed: int,
) -> SimulationStatistics:
    """对仓库中的前两名训练家重复运行竞技场。

    每次迭代都从仓库取一份新的副本，迭代之间互不影响。

    Args:
        repo: 已加载的训练家仓库
        kind: 竞技场类型
        iterations: 运行次数
        seed: 随机种子 (相同种子得到相同统计)

    Returns:
        SimulationStatistics: 累计统计
    """
    trainers = repo.list()
    rng = random.Random(seed)
    collector = StatisticsCollector()

    for _ in range(iterations):
        trainer_a = repo.get(trainers[0].id)
        trainer_b = repo.get(trainers[1].id)
        result = run_arena(trainer_a, trainer_b, kind, rng=rng)
        collector.on_arena(result)

    return collector.finalize()


def print_statistics(kind: ArenaKind, stats: SimulationStatistics) -> None:
    print("\n" + "=" * 70)
    print(f"{kind.value} 统计 ({stats.arenas} 次)")
    print("=" * 70)

    print("\n[竞技场胜者]")
    for name, count in stats.arena_winners.most_common():
        print(f"  {name:<20} {count:>6}  ({count / stats.arenas * 100:.1f}%)")

    print("\n[结束状态]")
    for state, count in stats.arena_states.most_common():
        print(f"  {state:<20} {count:>6}")

    print("\n[单场战斗]")
    print(f"  战斗场数:   {stats.fights}")
    print(f"  弃权次数:   {stats.forfeits}")
    print(f"  平均回合:   {stats.average_turns:.2f}")
    print(f"  回合范围:   {stats.min_turns} - {stats.max_turns}")
    print(f"  空过回合:   {stats.idle_turns}")
    for outcome, count in stats.outcomes.most_common():
        print(f"  {outcome:<12} {count:>6}")

    print("\n[招式使用]")
    for name, count in stats.attack_usage.most_common():
        print(f"  {name:<20} {count:>6} 次  总伤害 {stats.damage_by_attack[name]}")


def main():
    parser = argparse.ArgumentParser(
        description="竞技场批量模拟",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
竞技场:
  1 - 100 场随机挑战，每场前回复，按等级/经验定胜负
  2 - 最多 100 场确定性挑战，不回复，一方全灭即停止

示例:
  python sim_arena.py                     # 两种竞技场各运行 20 次
  python sim_arena.py --arena 1 -n 100    # 竞技场 1 运行 100 次
        """
    )
    parser.add_argument(
        "--arena", "-a",
        type=int,
        choices=list(ARENAS.keys()),
        help="运行指定竞技场 (不指定则运行全部)"
    )
    parser.add_argument(
        "--iterations", "-n",
        type=int,
        default=20,
        help="每种竞技场的运行次数 (默认: 20)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="随机种子 (默认: 0)"
    )
    parser.add_argument(
        "--data",
        default=Config.DEFAULT_DATA_FILE,
        help=f"训练家数据文件 (默认: {Config.DEFAULT_DATA_FILE})"
    )

    args = parser.parse_args()

    repo = TrainerRepository(args.data)
    repo.load()
    if len(repo.list()) < 2:
        print("错误: 数据文件中至少需要两名训练家")
        return

    kinds = [ARENAS[args.arena]] if args.arena else list(ARENAS.values())
    for kind in kinds:
        stats = run_simulation(repo, kind, args.iterations, args.seed)
        print_statistics(kind, stats)


if __name__ == "__main__":
    main()
