"""
Reversi Platform - Game View

ゲーム画面を提供します。
"""

import flet as ft
from dataclasses import dataclass
from typing import Optional

from game_core import GameEvent, OpponentMode, Stone
from players import GameSession, GameSessionConfig, SessionEvent
from ai_strategies import AIStrategyFactory

from ui.board_component import BoardComponent


@dataclass
class GameConfig:
    """画面の設定（コマンドライン引数から作成）"""
    opponent_mode: OpponentMode = OpponentMode.AUTOMATED
    ai_type: str = "heuristic"
    think_delay: float = 0.35
    show_hints: bool = True
    cell_size: int = 48


class GameView(ft.View):
    """
    ゲーム画面

    盤面表示、石数・手番・メッセージ表示、操作（新規ゲーム、待った、
    対戦モード切替、ヒント表示切替）を提供します。
    GameSession を保持し、エンジンの状態は直接変更しません。
    """

    def __init__(self, page: ft.Page, config: Optional[GameConfig] = None):
        super().__init__(route="/")
        self._page = page
        self._config = config or GameConfig()

        self._session = GameSession(
            strategy=AIStrategyFactory.create(self._config.ai_type),
            config=GameSessionConfig(
                opponent_mode=self._config.opponent_mode,
                think_delay=self._config.think_delay,
            ),
        )

        # UI要素
        self._board_component: BoardComponent = None  # type: ignore
        self._score_text: ft.Text = None  # type: ignore
        self._turn_text: ft.Text = None  # type: ignore
        self._message_text: ft.Text = None  # type: ignore

        self._build_ui()

    @property
    def session(self) -> GameSession:
        return self._session

    def _build_ui(self) -> None:
        """UIを構築"""
        title = ft.Text(
            "Reversi",
            size=24,
            weight=ft.FontWeight.BOLD,
        )

        self._board_component = BoardComponent(
            engine=self._session.engine,
            on_cell_click=self._on_cell_click,
            cell_size=self._config.cell_size,
            show_hints=self._config.show_hints,
        )

        self._score_text = ft.Text(size=18, weight=ft.FontWeight.BOLD)
        self._turn_text = ft.Text(size=16)
        self._message_text = ft.Text(size=14, color=ft.Colors.BLUE_700)

        status_container = ft.Column(
            controls=[self._score_text, self._turn_text, self._message_text],
            horizontal_alignment=ft.CrossAxisAlignment.CENTER,
            spacing=5,
        )

        mode_group = ft.RadioGroup(
            content=ft.Row(
                [
                    ft.Radio(value=OpponentMode.HUMAN.name, label="Human vs Human"),
                    ft.Radio(value=OpponentMode.AUTOMATED.name, label="Human vs CPU"),
                ],
                alignment=ft.MainAxisAlignment.CENTER,
            ),
            value=self._config.opponent_mode.name,
            on_change=self._on_mode_change,
        )

        hints_switch = ft.Switch(
            label="Show hints",
            value=self._config.show_hints,
            on_change=self._on_hints_change,
        )

        # 操作ボタン
        new_game_button = ft.ElevatedButton(
            content=ft.Row(
                [
                    ft.Icon(ft.Icons.REFRESH, size=18),
                    ft.Text("New Game"),
                ],
                alignment=ft.MainAxisAlignment.CENTER,
                spacing=5,
            ),
            on_click=self._on_new_game_click,
        )

        undo_button = ft.OutlinedButton(
            content=ft.Row(
                [
                    ft.Icon(ft.Icons.UNDO, size=18),
                    ft.Text("Undo"),
                ],
                alignment=ft.MainAxisAlignment.CENTER,
                spacing=5,
            ),
            on_click=self._on_undo_click,
        )

        button_row = ft.Row(
            controls=[new_game_button, undo_button],
            alignment=ft.MainAxisAlignment.CENTER,
            spacing=20,
        )

        # レイアウト
        content = ft.Container(
            content=ft.Column(
                controls=[
                    title,
                    ft.Divider(),
                    status_container,
                    ft.Container(height=10),
                    self._board_component,
                    ft.Container(height=10),
                    mode_group,
                    hints_switch,
                    ft.Container(height=10),
                    button_row,
                ],
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                scroll=ft.ScrollMode.AUTO,
            ),
            padding=20,
            expand=True,
        )

        self.controls = [content]

        # イベントリスナー登録
        self._session.engine.add_listener(self._on_game_event)
        self._session.add_listener(self._on_session_event)

        self._update_status()

    def start_game(self) -> None:
        """ゲームを開始（CPUが先手の場合に備えてセッション経由で開始）"""
        self._page.run_task(self._session.new_game)

    def _on_cell_click(self, row: int, col: int) -> None:
        """セルクリックハンドラ（不正な手はセッション側で無視される）"""
        if self._session.is_busy:
            return
        self._page.run_task(self._session.attempt_move, row, col)

    def _on_game_event(self, event: GameEvent) -> None:
        """ゲームエンジンイベントハンドラ（盤面の更新はBoardComponentが行う）"""
        if event.event_type == "PASS":
            self._message_text.value = event.message
        elif event.event_type == "GAME_OVER":
            self._message_text.value = f"{event.message} (start a new game to play again)"
        elif event.event_type in ["MOVE_PLAYED", "GAME_RESET", "UNDO"]:
            self._message_text.value = ""

        self._update_status()

    def _on_session_event(self, event: SessionEvent) -> None:
        """セッションイベントハンドラ（CPU思考中はクリック無効）"""
        if event.event_type == "THINKING_START":
            self._board_component.set_click_enabled(False)
            self._turn_text.value = event.message
        elif event.event_type == "THINKING_END":
            self._board_component.set_click_enabled(True)
            self._update_status()

        self._safe_update()

    def _update_status(self) -> None:
        """石数・手番表示を更新"""
        engine = self._session.engine
        score = engine.score()
        self._score_text.value = f"● Black {score.black}  -  {score.white} White ○"

        result = engine.result()
        if result is not None:
            self._turn_text.value = "Game Over"
        elif engine.current_turn == Stone.BLACK:
            self._turn_text.value = "● Black to move"
        else:
            self._turn_text.value = "○ White to move"

        self._safe_update()

    def _safe_update(self) -> None:
        """ページを安全に更新（セッション破棄済みの場合は無視）"""
        if self._page:
            try:
                self._page.update()
            except RuntimeError:
                pass  # セッション破棄済み

    def _on_mode_change(self, e: ft.ControlEvent) -> None:
        """対戦モード切替（進行中のゲームは維持し、CPUの手番ならCPUが打つ）"""
        mode = OpponentMode[e.control.value]
        self._page.run_task(self._session.set_opponent_mode, mode)

    def _on_hints_change(self, e: ft.ControlEvent) -> None:
        """ヒント表示切替"""
        self._board_component.set_show_hints(bool(e.control.value))

    def _on_new_game_click(self, e: ft.ControlEvent) -> None:
        """新規ゲームボタンクリックハンドラ"""
        self._page.run_task(self._session.new_game)

    def _on_undo_click(self, e: ft.ControlEvent) -> None:
        """待ったボタンクリックハンドラ（CPU思考中は無視される）"""
        self._page.run_task(self._session.undo)
