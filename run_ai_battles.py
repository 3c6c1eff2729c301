"""
AI対戦バッチスクリプト

AI同士を対戦させ、勝敗を集計します（評価関数の調整用）。

使用例:
    # デフォルト設定（Heuristic vs Random を10回）
    python run_ai_battles.py

    # カスタム設定
    python run_ai_battles.py --black random --white heuristic --games 50 --seed 7

    # 詳細表示
    python run_ai_battles.py --verbose
"""

import argparse
from datetime import datetime
from typing import Optional

from game_core import GameEngine, GameResult, GameStatus, ReversiRule, Stone
from ai_strategies import AIStrategy, AIStrategyFactory


def create_strategy(ai_type: str, seed: Optional[int] = None) -> AIStrategy:
    """AI戦略を作成"""
    return AIStrategyFactory.create(ai_type, seed=seed)


def play_game(black: AIStrategy, white: AIStrategy) -> GameResult:
    """
    1対局を最後まで実行

    エンジンは人間 vs 人間モードで使い、両方の手をここで選びます。
    思考待ちの遅延は入れません。

    Returns:
        終局時の GameResult
    """
    engine = GameEngine()
    strategies = {Stone.BLACK: black, Stone.WHITE: white}

    while not engine.is_game_over:
        strategy = strategies[engine.current_turn]
        position = strategy.select_move(engine.board, engine.current_turn, engine.legal_moves())
        result = engine.play_move(position)
        if not result.applied:
            raise RuntimeError(
                f"Invalid move by {strategy.name}: ({position.row}, {position.col})"
            )

    game_result = engine.result()
    if game_result is None:
        raise RuntimeError("Game loop ended before the game was over")
    return game_result


def run_battles(args) -> dict[GameStatus, int]:
    """複数対局を実行"""
    print("=" * 60)
    print("AI Battle Script")
    print("=" * 60)
    print(f"Rule: {ReversiRule().rule_name}")
    print(f"Black: {args.black}")
    print(f"White: {args.white}")
    print(f"Games: {args.games}")
    print("=" * 60)

    # 統計
    results = {
        GameStatus.BLACK_WIN: 0,
        GameStatus.WHITE_WIN: 0,
        GameStatus.DRAW: 0,
    }

    start_time = datetime.now()

    for i in range(1, args.games + 1):
        # 戦略は毎回新規作成（RandomAIはシードを対局ごとにずらす）
        seed = None if args.seed is None else args.seed + i
        black = create_strategy(args.black, seed)
        white = create_strategy(args.white, seed)

        result = play_game(black, white)
        results[result.status] += 1

        if args.verbose:
            print(f"  Game {i}: {result.summary}")
        else:
            print(f"\rProgress: {i}/{args.games} games completed", end="", flush=True)

    if not args.verbose:
        print()  # 改行

    elapsed = datetime.now() - start_time

    # 結果サマリー
    print("=" * 60)
    print("Results Summary")
    print("=" * 60)
    print(f"Black ({args.black}) wins: {results[GameStatus.BLACK_WIN]}")
    print(f"White ({args.white}) wins: {results[GameStatus.WHITE_WIN]}")
    print(f"Draws: {results[GameStatus.DRAW]}")
    print(f"Total time: {elapsed}")
    print("=" * 60)

    total = args.games
    if total > 0:
        black_rate = results[GameStatus.BLACK_WIN] / total * 100
        white_rate = results[GameStatus.WHITE_WIN] / total * 100
        draw_rate = results[GameStatus.DRAW] / total * 100
        print(f"Win rates: Black {black_rate:.1f}% / White {white_rate:.1f}% / Draw {draw_rate:.1f}%")

    return results


def parse_args(argv: Optional[list[str]] = None):
    parser = argparse.ArgumentParser(
        description="Run AI vs AI Reversi battles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_ai_battles.py                              # heuristic vs random, 10 games
  python run_ai_battles.py -b random -w heuristic -n 50 # 50 games
  python run_ai_battles.py --verbose                    # Show each result
        """
    )

    parser.add_argument(
        "--black", "-b",
        choices=AIStrategyFactory.list_available(),
        default="heuristic",
        help="Black player AI type (default: heuristic)"
    )
    parser.add_argument(
        "--white", "-w",
        choices=AIStrategyFactory.list_available(),
        default="random",
        help="White player AI type (default: random)"
    )
    parser.add_argument(
        "--games", "-n",
        type=int,
        default=10,
        help="Number of games to play (default: 10)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Base seed for random AIs (default: unseeded)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show detailed progress"
    )

    return parser.parse_args(argv)


def main():
    run_battles(parse_args())


if __name__ == "__main__":
    main()
