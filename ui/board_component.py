"""
Reversi Platform - Board Component

盤面表示とタップ操作を提供するFletコンポーネント。
"""

import flet as ft
from typing import Callable, Optional

from game_core import GameEngine, GameEvent, Stone


class BoardComponent(ft.Container):
    """
    盤面表示コンポーネント

    GameEngineの状態を表示し、セルクリック時にコールバックを呼びます。
    最後の手のマーカーと、合法手のヒント表示に対応します。
    """

    def __init__(
        self,
        engine: GameEngine,
        on_cell_click: Optional[Callable[[int, int], None]] = None,
        cell_size: int = 48,
        show_hints: bool = True,
        **kwargs
    ):
        super().__init__(**kwargs)
        self._engine = engine
        self._on_cell_click = on_cell_click
        self._cell_size = cell_size
        self._show_hints = show_hints
        self._cells: list[list[ft.Container]] = []
        self._click_enabled = True
        self._size = engine.board.size

        self._build_board()
        engine.add_listener(self._on_game_event)

    def _build_board(self) -> None:
        """盤面UIを構築"""
        rows = []
        self._cells = []
        hints = self._hint_cells()

        for row in range(self._size):
            row_cells: list[ft.Container] = []

            for col in range(self._size):
                row_cells.append(self._create_cell(row, col, hints))

            self._cells.append(row_cells)
            rows.append(ft.Row(
                controls=row_cells,
                spacing=1,
                alignment=ft.MainAxisAlignment.CENTER
            ))

        self.content = ft.Column(
            controls=rows,
            spacing=1,
            horizontal_alignment=ft.CrossAxisAlignment.CENTER
        )

        board_size = self._size * (self._cell_size + 1)
        self.width = board_size + 10
        self.height = board_size + 10
        self.bgcolor = "#1B4D2E"
        self.border_radius = 5
        self.padding = 5

    def _create_cell(self, row: int, col: int, hints: set[tuple[int, int]]) -> ft.Container:
        """1つのセルを作成"""
        return ft.Container(
            content=self._get_cell_content(row, col, hints),
            width=self._cell_size,
            height=self._cell_size,
            bgcolor="#2E7D4F",
            border_radius=2,
            alignment=ft.Alignment(0, 0),
            tooltip=f"Row {row + 1}, Column {col + 1}",
            on_click=lambda e, row=row, col=col: self._handle_click(row, col),
        )

    def _get_cell_content(
        self,
        row: int,
        col: int,
        hints: set[tuple[int, int]]
    ) -> Optional[ft.Control]:
        """セルの表示コンテンツ（石・最終手マーカー・ヒント）を取得"""
        stone = self._engine.get_stone_at(row, col)

        if stone == Stone.EMPTY:
            if (row, col) not in hints:
                return None
            hint_size = int(self._cell_size * 0.25)
            color = "#1a1a1a" if self._engine.current_turn == Stone.BLACK else "#f5f5f5"
            return ft.Container(
                width=hint_size,
                height=hint_size,
                bgcolor=ft.Colors.with_opacity(0.5, color),
                border_radius=hint_size // 2,
            )

        stone_size = int(self._cell_size * 0.8)
        last_move = self._engine.last_move
        is_last = last_move is not None and (last_move.row, last_move.col) == (row, col)

        return ft.Container(
            width=stone_size,
            height=stone_size,
            bgcolor="#1a1a1a" if stone == Stone.BLACK else "#f5f5f5",
            border_radius=stone_size // 2,
            border=ft.border.all(2, "#ff6b6b") if is_last else None,
            shadow=ft.BoxShadow(
                spread_radius=1,
                blur_radius=3,
                color=ft.Colors.with_opacity(0.3, ft.Colors.BLACK),
                offset=ft.Offset(2, 2),
            ),
        )

    def _hint_cells(self) -> set[tuple[int, int]]:
        """ヒントを表示するセル（現在の手番の合法手）"""
        if not self._show_hints:
            return set()
        return {(p.row, p.col) for p in self._engine.legal_moves()}

    def _handle_click(self, row: int, col: int) -> None:
        """セルクリックハンドラ"""
        if not self._click_enabled:
            return

        if self._on_cell_click:
            self._on_cell_click(row, col)

    def _on_game_event(self, event: GameEvent) -> None:
        """ゲームイベントハンドラ"""
        if event.event_type in ["MOVE_PLAYED", "PASS", "GAME_OVER", "GAME_RESET", "UNDO"]:
            self.refresh_board()

    def refresh_board(self) -> None:
        """盤面表示を更新"""
        hints = self._hint_cells()
        for row in range(self._size):
            for col in range(self._size):
                self._cells[row][col].content = self._get_cell_content(row, col, hints)

        if self.page:
            self.update()

    def set_click_enabled(self, enabled: bool) -> None:
        """クリックの有効/無効を設定"""
        self._click_enabled = enabled

    def set_show_hints(self, show: bool) -> None:
        """合法手ヒントの表示/非表示を設定"""
        self._show_hints = show
        self.refresh_board()

    @property
    def engine(self) -> GameEngine:
        """ゲームエンジン"""
        return self._engine
