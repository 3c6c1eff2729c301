"""
Reversi Platform - Player / Session Module

CPUプレイヤーとゲームセッション管理を提供します。

設計原則:
- GameEngine は同期（1手の検証・適用・終局判定は1ステップで完了）
- AIStrategy は同期メソッド（計算のみ）
- AIPlayer 内で asyncio.to_thread() を使用してスレッド分離
- CPUの「考えている時間」は GameSession が asyncio.sleep() で与える

クラス構成:
- AIPlayer: AIプレイヤー（AIStrategyを使用）
- GameSession: 画面側が保持するゲームセッション（思考待ち中の入力排他）
"""

from dataclasses import dataclass
from typing import Optional, Callable
import asyncio

from game_core import (
    GameEngine, MoveResult, OpponentMode, Position, Stone
)
from ai_strategies import AIStrategy, HeuristicAI


class AIPlayer:
    """
    AIプレイヤー

    AIStrategy を使用して手を決定します。
    計算処理は asyncio.to_thread() で別スレッドで実行し、
    UIをブロックしません。

    使用例:
        player = AIPlayer(HeuristicAI())
        move = await player.get_move(engine)
    """

    def __init__(self, strategy: AIStrategy, name: Optional[str] = None):
        """
        Args:
            strategy: 使用するAI戦略
            name: プレイヤー名（省略時は戦略名を使用）
        """
        self._strategy = strategy
        self._name = name or f"CPU ({strategy.name})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def strategy(self) -> AIStrategy:
        """使用中のAI戦略"""
        return self._strategy

    async def get_move(self, engine: GameEngine) -> Position:
        """
        AI戦略を使用して次の手を決定

        盤面・手番・合法手はイベントループ側で取得してから
        別スレッドに渡すため、計算中にエンジンが変更されても影響を受けません。

        Raises:
            ValueError: 合法手がない場合
        """
        board = engine.board
        stone = engine.current_turn
        legal_moves = engine.legal_moves()

        return await asyncio.to_thread(
            self._strategy.select_move,
            board,
            stone,
            legal_moves
        )


# ----------------------
# ゲームセッション
# ----------------------

@dataclass
class GameSessionConfig:
    """ゲームセッションの設定"""
    opponent_mode: OpponentMode = OpponentMode.HUMAN
    automated_side: Stone = Stone.WHITE   # CPUの石（デフォルトは白）
    think_delay: float = 0.35             # CPUが打つまでの待ち時間（秒）


@dataclass
class SessionEvent:
    """
    ゲームセッションイベント

    GameEventとは別に、セッションレベルのイベントを表します。
    """
    event_type: str  # "THINKING_START", "THINKING_END"
    stone: Optional[Stone] = None
    position: Optional[Position] = None
    message: str = ""


# セッションイベントのコールバック型
SessionEventCallback = Callable[[SessionEvent], None]


class GameSession:
    """
    ゲームセッション管理

    GameEngine を所有し、画面からの操作を受け付けます。
    CPU対戦モードでは、人間の着手後にCPUの手を遅延付きで打ちます。
    CPUの手番が終わるまで（busy中）は人間の着手・待ったを受け付けません。

    使用例:
        session = GameSession(HeuristicAI(), GameSessionConfig(
            opponent_mode=OpponentMode.AUTOMATED
        ))
        result = await session.attempt_move(2, 3)  # CPUの応手まで待つ
    """

    def __init__(
        self,
        strategy: Optional[AIStrategy] = None,
        config: Optional[GameSessionConfig] = None
    ):
        """
        Args:
            strategy: CPUが使うAI戦略（省略時はHeuristicAI）
            config: セッション設定（省略時はデフォルト）
        """
        self._config = config or GameSessionConfig()
        self._engine = GameEngine(
            opponent_mode=self._config.opponent_mode,
            automated_side=self._config.automated_side,
        )
        self._ai_player = AIPlayer(strategy or HeuristicAI())
        self._listeners: list[SessionEventCallback] = []
        self._busy = False
        self._game_generation = 0

    @property
    def engine(self) -> GameEngine:
        """ゲームエンジン（読み取り用。直接変更しないこと）"""
        return self._engine

    @property
    def ai_player(self) -> AIPlayer:
        return self._ai_player

    @property
    def config(self) -> GameSessionConfig:
        return self._config

    @property
    def is_busy(self) -> bool:
        """CPUの手番を処理中かどうか"""
        return self._busy

    def add_listener(self, callback: SessionEventCallback) -> None:
        """セッションイベントリスナーを登録"""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: SessionEventCallback) -> bool:
        """セッションイベントリスナーを解除"""
        if callback in self._listeners:
            self._listeners.remove(callback)
            return True
        return False

    def _notify_listeners(self, event: SessionEvent) -> None:
        """全リスナーにイベントを通知"""
        for listener in self._listeners:
            try:
                listener(event)
            except Exception as e:
                print(f"Session listener error: {e}")

    async def new_game(self) -> None:
        """
        新しいゲームを開始

        思考待ち中のCPUの手は破棄されます。CPUが先手なら、CPUが打ちます。
        """
        self._game_generation += 1
        self._engine.new_game()
        await self._run_automated_turns()

    async def attempt_move(self, row: int, col: int) -> MoveResult:
        """
        人間の着手

        不正な手やCPUの処理中の入力は無視されます（applied=False）。
        CPU対戦モードでCPUの手番になった場合は、CPUの手が打たれるまで待ちます。

        Returns:
            人間の着手の MoveResult
        """
        if self._busy:
            return MoveResult(applied=False)

        result = self._engine.attempt_move(row, col)
        if result.applied:
            await self._run_automated_turns()
        return result

    async def undo(self) -> bool:
        """
        待った

        CPUの処理中は何もしません。戻した結果CPUの手番なら、CPUが打ち直します。

        Returns:
            戻せたらTrue
        """
        if self._busy:
            return False

        undone = self._engine.undo()
        if undone:
            await self._run_automated_turns()
        return undone

    async def set_opponent_mode(self, mode: OpponentMode) -> None:
        """
        対戦モードを変更

        CPU対戦に切り替えた時点でCPUの手番なら、すぐにCPUが打ちます。
        待ち時間中に人間対人間へ切り替えた場合、CPUは打ちません。
        待ち時間を過ぎて計算中の手は、そのまま打たれます。
        """
        self._engine.set_opponent_mode(mode)
        await self._run_automated_turns()

    async def _run_automated_turns(self) -> None:
        """CPUの手番が続く間、遅延を入れてCPUの手を打つ"""
        if self._busy:
            return

        self._busy = True
        try:
            while self._engine.is_automated_turn:
                generation = self._game_generation
                stone = self._engine.current_turn
                self._notify_listeners(SessionEvent(
                    event_type="THINKING_START",
                    stone=stone,
                    message=f"{self._ai_player.name} is thinking..."
                ))

                await asyncio.sleep(self._config.think_delay)

                # 待ち時間中のモード変更、または新規ゲーム開始後は打たない
                position = None
                if generation == self._game_generation and self._engine.is_automated_turn:
                    position = await self._ai_player.get_move(self._engine)
                if position is None or generation != self._game_generation:
                    self._notify_listeners(SessionEvent(
                        event_type="THINKING_END",
                        stone=stone,
                        message="Automated move dropped"
                    ))
                    continue

                result = self._engine.play_move(position)
                if not result.applied:
                    raise RuntimeError(
                        f"Invalid move by {self._ai_player.name}: ({position.row}, {position.col})"
                    )

                self._notify_listeners(SessionEvent(
                    event_type="THINKING_END",
                    stone=stone,
                    position=position,
                    message=f"{self._ai_player.name} played ({position.row}, {position.col})"
                ))
        finally:
            self._busy = False
