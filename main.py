"""
Reversi Platform - Main Application

Fletアプリのエントリーポイント。

実行方法:
    # 人間 vs CPU（デフォルト）
    python main.py

    # 人間 vs 人間
    python main.py --mode human

    # CPUの種類と思考待ち時間を変更
    python main.py --ai random --delay 1.0

オプション:
    --mode, -m      対戦モード (human, cpu)
    --ai, -a        CPUの戦略 (heuristic, random)
    --delay         CPUが打つまでの待ち時間（秒）
    --no-hints      合法手のヒントを非表示
"""

import argparse
import flet as ft

from game_core import OpponentMode
from ai_strategies import AIStrategyFactory
from ui.game_view import GameConfig, GameView


def parse_args(argv=None):
    """コマンドライン引数をパース"""
    parser = argparse.ArgumentParser(
        description="Reversi Platform - 8x8 Reversi with a CPU opponent",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                      # Human vs CPU (heuristic)
  python main.py --mode human         # Human vs Human
  python main.py --ai random          # Human vs Random CPU
  python main.py --delay 0 --no-hints # Instant CPU, no move hints
        """
    )

    parser.add_argument(
        "--mode", "-m",
        choices=["human", "cpu"],
        default="cpu",
        help="Opponent mode (default: cpu)"
    )
    parser.add_argument(
        "--ai", "-a",
        choices=AIStrategyFactory.list_available(),
        default="heuristic",
        help="CPU strategy (default: heuristic)"
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=0.35,
        help="CPU thinking delay in seconds (default: 0.35)"
    )
    parser.add_argument(
        "--no-hints",
        action="store_true",
        help="Hide legal move hints"
    )

    return parser.parse_args(argv)


def create_config_from_args(args) -> GameConfig:
    """コマンドライン引数からGameConfigを作成"""
    mode_map = {
        "human": OpponentMode.HUMAN,
        "cpu": OpponentMode.AUTOMATED,
    }

    return GameConfig(
        opponent_mode=mode_map[args.mode],
        ai_type=args.ai,
        think_delay=max(args.delay, 0.0),
        show_hints=not args.no_hints,
    )


def main(page: ft.Page, config: GameConfig = None) -> None:
    """Fletアプリのメイン関数"""
    # ページ設定
    page.title = "Reversi"
    page.window.width = 520
    page.window.height = 760
    page.window.min_width = 460
    page.window.min_height = 700
    page.theme_mode = ft.ThemeMode.LIGHT
    page.padding = 0

    page.views.clear()
    game_view = GameView(page, config)
    page.views.append(game_view)
    page.update()
    game_view.start_game()


# グローバル変数で初期設定を保持（ft.runのコールバックに渡すため）
_initial_config: GameConfig = None


def _main_wrapper(page: ft.Page) -> None:
    """ft.run用のラッパー"""
    main(page, _initial_config)


if __name__ == "__main__":
    args = parse_args()
    _initial_config = create_config_from_args(args)
    print(f"Starting Reversi: mode={args.mode}, ai={args.ai}, delay={args.delay}s")

    ft.run(_main_wrapper)
