"""
Reversi Platform - Player Tests

AIPlayer と GameSession のユニットテストを提供します。
"""

import pytest
import asyncio
import threading
from unittest.mock import Mock

from game_core import Board, GameEngine, GameStatus, OpponentMode, Position, Stone
from players import AIPlayer, GameSession, GameSessionConfig
from ai_strategies import AIStrategy, HeuristicAI, RandomAI


WHITE_REPLIES = {Position(2, 2), Position(2, 4), Position(4, 2)}


def cpu_session(delay: float = 0.0, **kwargs) -> GameSession:
    """CPU対戦モードのセッション"""
    config = GameSessionConfig(
        opponent_mode=OpponentMode.AUTOMATED,
        think_delay=delay,
        **kwargs
    )
    return GameSession(HeuristicAI(), config)


class BlockingAI(AIStrategy):
    """計算中の状態を外から保てるAI（最初の合法手を返す）"""

    def __init__(self):
        self.started = threading.Event()
        self.release = threading.Event()

    @property
    def name(self) -> str:
        return "Blocking"

    @property
    def difficulty(self) -> str:
        return "Easy"

    def select_move(self, board, stone, legal_moves):
        self.started.set()
        self.release.wait(5.0)
        return next(iter(legal_moves))


class TestAIPlayer:
    """AIPlayerのテスト"""

    def test_name_from_strategy(self):
        """戦略名がプレイヤー名に使われる"""
        player = AIPlayer(HeuristicAI())
        assert player.name == "CPU (Heuristic)"

    def test_custom_name(self):
        """カスタム名を設定できる"""
        player = AIPlayer(RandomAI(), name="Bob")
        assert player.name == "Bob"

    def test_strategy_property(self):
        strategy = RandomAI()
        assert AIPlayer(strategy).strategy is strategy

    @pytest.mark.asyncio
    async def test_returns_valid_move(self):
        """AIが合法手を返す"""
        player = AIPlayer(RandomAI(seed=42))
        engine = GameEngine()

        move = await player.get_move(engine)

        assert engine.is_legal_move(move.row, move.col)

    @pytest.mark.asyncio
    async def test_heuristic_opening_move(self):
        """HeuristicAIの初手は(2,3)"""
        player = AIPlayer(HeuristicAI())
        move = await asyncio.wait_for(player.get_move(GameEngine()), timeout=5.0)
        assert move == Position(2, 3)


class TestGameSession:
    """GameSessionのテスト"""

    def test_defaults(self):
        """デフォルトは人間対人間、白がCPU側、0.35秒待ち"""
        session = GameSession()
        assert session.engine.opponent_mode == OpponentMode.HUMAN
        assert session.engine.automated_side == Stone.WHITE
        assert session.config.think_delay == pytest.approx(0.35)
        assert session.is_busy is False
        assert "Heuristic" in session.ai_player.name

    @pytest.mark.asyncio
    async def test_human_mode_has_no_reply(self):
        """人間対人間では相手の手を打たない"""
        session = GameSession(config=GameSessionConfig(think_delay=0.0))

        result = await session.attempt_move(2, 3)

        assert result.applied is True
        assert session.engine.current_turn == Stone.WHITE
        assert session.engine.history_size == 1

    @pytest.mark.asyncio
    async def test_illegal_input_is_ignored(self):
        """不正な入力は無視され、CPUも打たない"""
        session = cpu_session()

        result = await session.attempt_move(0, 0)

        assert result.applied is False
        assert session.engine.board == Board.initial_standard()
        assert session.engine.history_size == 0

    @pytest.mark.asyncio
    async def test_cpu_replies_after_human_move(self):
        """人間の着手後にCPUが応手する"""
        session = cpu_session()

        result = await asyncio.wait_for(session.attempt_move(2, 3), timeout=5.0)

        assert result.applied is True
        engine = session.engine
        assert engine.current_turn == Stone.BLACK
        assert engine.history_size == 2
        assert engine.last_move in WHITE_REPLIES
        assert (engine.score().black, engine.score().white) == (3, 3)
        assert session.is_busy is False

    @pytest.mark.asyncio
    async def test_input_rejected_while_cpu_is_thinking(self):
        """CPUの思考待ち中は着手も待ったも受け付けない"""
        session = cpu_session(delay=0.2)

        task = asyncio.create_task(session.attempt_move(2, 3))
        await asyncio.sleep(0.05)

        assert session.is_busy is True
        assert session.engine.current_turn == Stone.WHITE
        assert (await session.attempt_move(2, 2)).applied is False
        assert await session.undo() is False
        assert session.engine.history_size == 1

        await asyncio.wait_for(task, timeout=5.0)

        assert session.is_busy is False
        assert session.engine.current_turn == Stone.BLACK
        assert session.engine.history_size == 2

    @pytest.mark.asyncio
    async def test_undo_returns_to_human_turn(self):
        """CPU対戦での待ったは人間の手番まで戻す"""
        session = cpu_session()
        await session.attempt_move(2, 3)

        assert await session.undo() is True

        assert session.engine.board == Board.initial_standard()
        assert session.engine.current_turn == Stone.BLACK
        assert session.engine.history_size == 0

    @pytest.mark.asyncio
    async def test_undo_with_empty_history(self):
        session = cpu_session()
        assert await session.undo() is False

    @pytest.mark.asyncio
    async def test_switch_to_cpu_on_its_turn_triggers_move(self):
        """CPUの手番でCPU対戦に切り替えると、すぐCPUが打つ"""
        session = GameSession(config=GameSessionConfig(think_delay=0.0))
        await session.attempt_move(2, 3)
        assert session.engine.current_turn == Stone.WHITE

        await asyncio.wait_for(
            session.set_opponent_mode(OpponentMode.AUTOMATED), timeout=5.0
        )

        assert session.engine.current_turn == Stone.BLACK
        assert session.engine.last_move in WHITE_REPLIES

    @pytest.mark.asyncio
    async def test_new_game_drops_pending_cpu_move(self):
        """思考待ち中に新規ゲームを始めると、CPUの手は破棄される"""
        session = cpu_session(delay=0.2)

        task = asyncio.create_task(session.attempt_move(2, 3))
        await asyncio.sleep(0.05)
        await session.new_game()
        await asyncio.wait_for(task, timeout=5.0)

        assert session.engine.board == Board.initial_standard()
        assert session.engine.current_turn == Stone.BLACK
        assert session.engine.history_size == 0
        assert session.is_busy is False

    @pytest.mark.asyncio
    async def test_switch_to_human_drops_pending_cpu_move(self):
        """思考待ち中に人間対人間へ切り替えると、CPUは打たない"""
        session = cpu_session(delay=0.2)

        task = asyncio.create_task(session.attempt_move(2, 3))
        await asyncio.sleep(0.05)
        await session.set_opponent_mode(OpponentMode.HUMAN)
        await asyncio.wait_for(task, timeout=5.0)

        assert session.engine.current_turn == Stone.WHITE
        assert session.engine.history_size == 1

    @pytest.mark.asyncio
    async def test_mode_switch_keeps_move_being_computed(self):
        """待ち時間を過ぎて計算中なら、モードを切り替えてもCPUの手は打たれる"""
        ai = BlockingAI()
        session = GameSession(ai, GameSessionConfig(
            opponent_mode=OpponentMode.AUTOMATED,
            think_delay=0.0,
        ))

        task = asyncio.create_task(session.attempt_move(2, 3))
        assert await asyncio.to_thread(ai.started.wait, 5.0)

        await session.set_opponent_mode(OpponentMode.HUMAN)
        ai.release.set()
        await asyncio.wait_for(task, timeout=5.0)

        engine = session.engine
        assert engine.opponent_mode == OpponentMode.HUMAN
        assert engine.last_move == Position(2, 2)
        assert engine.current_turn == Stone.BLACK
        assert engine.history_size == 2
        assert session.is_busy is False

    @pytest.mark.asyncio
    async def test_new_game_drops_move_being_computed(self):
        """計算中に新規ゲームを始めると、古い局面の手は破棄される"""
        ai = BlockingAI()
        session = GameSession(ai, GameSessionConfig(
            opponent_mode=OpponentMode.AUTOMATED,
            think_delay=0.0,
        ))

        task = asyncio.create_task(session.attempt_move(2, 3))
        assert await asyncio.to_thread(ai.started.wait, 5.0)

        await session.new_game()
        ai.release.set()
        await asyncio.wait_for(task, timeout=5.0)

        assert session.engine.board == Board.initial_standard()
        assert session.engine.history_size == 0
        assert session.is_busy is False

    @pytest.mark.asyncio
    async def test_cpu_moving_first(self):
        """CPUが黒なら新規ゲームでCPUが先に打つ"""
        session = cpu_session(automated_side=Stone.BLACK)

        await asyncio.wait_for(session.new_game(), timeout=5.0)

        assert session.engine.current_turn == Stone.WHITE
        assert session.engine.last_move == Position(2, 3)

    @pytest.mark.asyncio
    async def test_cpu_moves_again_when_human_must_pass(self):
        """人間がパスする場合、CPUが続けて打つ"""
        session = cpu_session()
        board = Board.from_strings([
            "W B . . . . . .",
            ". . . . . . . .",
            ". . . . . . . .",
            ". . . . . . . .",
            ". . . . . . . .",
            ". . . . . . . .",
            ". . . . . . . .",
            "W B . . . . . .",
        ])
        session.engine.load_position(board, Stone.WHITE)

        await asyncio.wait_for(
            session.set_opponent_mode(OpponentMode.AUTOMATED), timeout=5.0
        )

        engine = session.engine
        assert engine.history_size == 2
        assert engine.is_game_over
        assert engine.status == GameStatus.WHITE_WIN
        assert (engine.score().black, engine.score().white) == (0, 6)

    @pytest.mark.asyncio
    async def test_thinking_events(self):
        """CPUの手番でTHINKING_START / THINKING_END が通知される"""
        session = cpu_session()
        listener = Mock()
        session.add_listener(listener)

        await session.attempt_move(2, 3)

        events = [c[0][0] for c in listener.call_args_list]
        assert [e.event_type for e in events] == ["THINKING_START", "THINKING_END"]
        assert events[0].stone == Stone.WHITE
        assert events[1].position == session.engine.last_move

    def test_remove_listener(self):
        session = GameSession()
        listener = Mock()
        session.add_listener(listener)
        assert session.remove_listener(listener) is True
        assert session.remove_listener(listener) is False
