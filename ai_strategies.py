"""
Reversi Platform - AI Strategies Module

AI戦略の実装を提供します。

設計原則:
- AIStrategy は同期メソッド（計算のみ）
- 非同期化・思考待ちの遅延は AIPlayer / GameSession 側の責務
- 各戦略は select_move() で着手する座標を返す

利用可能なAI:
- RandomAI: 合法手からランダム選択（Easy）
- HeuristicAI: 位置の重み + 返す石の数 + 相手の着手可能数（Normal）
"""

from abc import ABC, abstractmethod
from typing import Optional
import random

from game_core import Board, Move, Position, ReversiRule, Stone


# 位置の重み（角を重視し、角の隣を避ける）
POSITION_WEIGHTS: tuple[tuple[int, ...], ...] = (
    (120, -20, 20, 5, 5, 20, -20, 120),
    (-20, -40, -5, -5, -5, -5, -40, -20),
    (20, -5, 15, 3, 3, 15, -5, 20),
    (5, -5, 3, 3, 3, 3, -5, 5),
    (5, -5, 3, 3, 3, 3, -5, 5),
    (20, -5, 15, 3, 3, 15, -5, 20),
    (-20, -40, -5, -5, -5, -5, -40, -20),
    (120, -20, 20, 5, 5, 20, -20, 120),
)

FLIP_WEIGHT = 10
MOBILITY_WEIGHT = 2


class AIStrategy(ABC):
    """
    AI戦略の抽象基底クラス（Strategyパターン）

    全てのAI実装はこのインターフェースを実装します。
    select_move() は同期メソッドで、純粋に計算のみを行います。
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """戦略名（表示用）"""
        pass

    @property
    @abstractmethod
    def difficulty(self) -> str:
        """難易度表示（Easy/Normal）"""
        pass

    @abstractmethod
    def select_move(
        self,
        board: Board,
        stone: Stone,
        legal_moves: dict[Position, Move]
    ) -> Position:
        """
        着手を選択

        Args:
            board: 現在の盤面（コピーなので自由に参照可能）
            stone: 次に置く石の色
            legal_moves: この盤面・手番の合法手（ReversiRule.get_legal_movesの結果）

        Returns:
            選択した座標

        Raises:
            ValueError: 合法手がない場合
        """
        pass


class RandomAI(AIStrategy):
    """
    ランダムAI

    合法手からランダムに選択します。
    テスト用・最弱AIとして使用します。
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Args:
            seed: 乱数シード（テスト用、省略時はランダム）
        """
        self._rng = random.Random(seed)

    @property
    def name(self) -> str:
        return "Random"

    @property
    def difficulty(self) -> str:
        return "Easy"

    def select_move(
        self,
        board: Board,
        stone: Stone,
        legal_moves: dict[Position, Move]
    ) -> Position:
        """合法手からランダムに選択"""
        if not legal_moves:
            raise ValueError("No valid moves available")

        return self._rng.choice(list(legal_moves))


class HeuristicAI(AIStrategy):
    """
    評価関数による1手読みAI

    各候補手を次の式で評価し、最高点の手を選びます:

        score = 返す石の数 * 10 + POSITION_WEIGHTS[row][col] - 相手の着手可能数 * 2

    同点の場合は、行優先で先に現れた手を選びます（決定的）。
    それ以上の先読みは行いません。
    """

    def __init__(self, rule: Optional[ReversiRule] = None):
        """
        Args:
            rule: 着手の適用と相手の合法手の計算に使うルール
        """
        self._rule = rule or ReversiRule()

    @property
    def name(self) -> str:
        return "Heuristic"

    @property
    def difficulty(self) -> str:
        return "Normal"

    def score_move(self, board: Board, stone: Stone, move: Move) -> int:
        """
        1つの候補手を評価

        Args:
            board: 現在の盤面
            stone: 置く石
            move: この盤面・手番の合法手

        Returns:
            評価値（大きいほど良い）
        """
        position = move.position
        immediate = len(move.flips) * FLIP_WEIGHT + POSITION_WEIGHTS[position.row][position.col]

        next_board = self._rule.apply_move(board, move, stone)
        opponent_mobility = len(self._rule.get_legal_moves(next_board, stone.opponent()))

        return immediate - opponent_mobility * MOBILITY_WEIGHT

    def select_move(
        self,
        board: Board,
        stone: Stone,
        legal_moves: dict[Position, Move]
    ) -> Position:
        """評価値が最大の手を選択"""
        if not legal_moves:
            raise ValueError("No valid moves available")

        # 行優先で評価（dictの順序に依存しない）
        candidates = sorted(legal_moves.values(), key=lambda m: (m.position.row, m.position.col))

        best_move = candidates[0].position
        best_score = self.score_move(board, stone, candidates[0])
        for move in candidates[1:]:
            score = self.score_move(board, stone, move)
            if score > best_score:
                best_score = score
                best_move = move.position

        return best_move


class AIStrategyFactory:
    """AI戦略のファクトリ"""

    @staticmethod
    def create(name: str, **kwargs) -> AIStrategy:
        """
        名前からAI戦略を作成

        Args:
            name: 戦略名（"random", "heuristic"）
            **kwargs: 各戦略固有のパラメータ

        Returns:
            AI戦略インスタンス

        Examples:
            >>> ai = AIStrategyFactory.create("heuristic")
            >>> ai = AIStrategyFactory.create("random", seed=42)
        """
        name_lower = name.lower()

        if name_lower == "random":
            return RandomAI(seed=kwargs.get("seed"))

        elif name_lower == "heuristic":
            return HeuristicAI(rule=kwargs.get("rule"))

        else:
            raise ValueError(f"Unknown AI strategy: {name}")

    @staticmethod
    def list_available() -> list[str]:
        """利用可能な戦略名一覧"""
        return ["heuristic", "random"]
