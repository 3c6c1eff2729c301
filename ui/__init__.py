"""
Reversi Platform - UI Module

Fletを使用したGUIコンポーネントを提供します。

コンポーネント:
- BoardComponent: 盤面表示コンポーネント
- GameView: ゲーム画面
- GameConfig: 画面の設定
"""

from ui.board_component import BoardComponent
from ui.game_view import GameConfig, GameView

__all__ = ["BoardComponent", "GameConfig", "GameView"]
