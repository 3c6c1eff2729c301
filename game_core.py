"""
Reversi Platform - Core Game Logic

このモジュールは、8x8 のリバーシ（オセロ）のルールエンジンを提供します。

アーキテクチャ:
- Board: 盤面状態のみを保持する純粋なデータクラス
- ReversiRule: 合法手の列挙（挟める石の計算）と着手の適用
- HistoryStack: Undo用のスナップショット履歴
- GameEngine: ゲーム進行管理（手番、パス、終局判定、Observerパターンによる状態通知）
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Optional


BOARD_SIZE = 8

# 探索方向（固定順序: 北西, 北, 北東, 西, 東, 南西, 南, 南東）
# 返す石のリストの順序はこの順序で決まる
DIRECTIONS: tuple[tuple[int, int], ...] = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),           (0, 1),
    (1, -1),  (1, 0),  (1, 1),
)


class Stone(Enum):
    """盤面上の石（セルの状態）を表す列挙型"""
    EMPTY = auto()
    BLACK = auto()
    WHITE = auto()

    def opponent(self) -> "Stone":
        """
        相手の石色を返す

        Raises:
            ValueError: EMPTYに対して呼ばれた場合（手番は黒か白のみ）
        """
        if self == Stone.BLACK:
            return Stone.WHITE
        elif self == Stone.WHITE:
            return Stone.BLACK
        raise ValueError("EMPTY has no opponent")


class GameStatus(Enum):
    """ゲームの状態を表す列挙型"""
    ONGOING = auto()      # 進行中
    BLACK_WIN = auto()    # 黒の勝利
    WHITE_WIN = auto()    # 白の勝利
    DRAW = auto()         # 引き分け（石数が同じ）


class OpponentMode(Enum):
    """対戦モード"""
    HUMAN = auto()        # 人間 vs 人間
    AUTOMATED = auto()    # 人間 vs CPU


class BoardIndexError(IndexError):
    """盤面外の座標を参照した"""


class InvalidMoveError(ValueError):
    """
    合法手一覧に存在しない手を適用しようとした

    これはUIの誤クリックではなくプログラムのバグを意味します
    （MoveFinderとMoveApplierの不整合）。
    """


@dataclass(frozen=True)
class Position:
    """盤面上の座標を表す不変データクラス（0始まり）"""
    row: int
    col: int


@dataclass(frozen=True)
class Move:
    """
    着手とそれによって返る石

    Moveは生成元の（盤面, 手番）に対してのみ意味を持ちます。
    盤面が変わったら古いMoveは使わないでください。
    """
    position: Position
    flips: tuple[Position, ...]


@dataclass
class GameEvent:
    """
    ゲームイベントを表すデータクラス

    Observerに通知されるイベント情報を格納します。
    event_type: MOVE_PLAYED, PASS, GAME_OVER, GAME_RESET, UNDO, MODE_CHANGED
    """
    event_type: str
    position: Optional[Position] = None
    stone: Optional[Stone] = None
    status: Optional[GameStatus] = None
    flips: tuple[Position, ...] = ()
    message: str = ""


# Observerのコールバック型定義
GameEventCallback = Callable[[GameEvent], None]


@dataclass(frozen=True)
class Score:
    """石数の集計"""
    black: int
    white: int


@dataclass(frozen=True)
class GameResult:
    """終局時の結果"""
    status: GameStatus
    black: int
    white: int

    @property
    def winner(self) -> Optional[Stone]:
        """勝者（引き分けならNone）"""
        if self.status == GameStatus.BLACK_WIN:
            return Stone.BLACK
        if self.status == GameStatus.WHITE_WIN:
            return Stone.WHITE
        return None

    @property
    def summary(self) -> str:
        """結果の表示用文字列（例: "Black wins! 40 - 24"）"""
        if self.status == GameStatus.BLACK_WIN:
            return f"Black wins! {self.black} - {self.white}"
        if self.status == GameStatus.WHITE_WIN:
            return f"White wins! {self.white} - {self.black}"
        return f"Draw! {self.black} - {self.white}"


@dataclass
class MoveResult:
    """
    attempt_move / play_move の結果

    Attributes:
        applied: 手が適用されたか（不正な手は False で無視される）
        passed: パスした側（パスがなければ None）
        terminal: この手で終局したか
    """
    applied: bool
    passed: Optional[Stone] = None
    terminal: bool = False


class Board:
    """
    盤面の状態を保持する純粋なデータクラス

    責務:
    - 石の配置状態の保持
    - 座標の境界チェック
    - 石の取得

    石の書き換えは ReversiRule.apply_move からのみ行います。
    """

    _CHARS = {Stone.EMPTY: ".", Stone.BLACK: "B", Stone.WHITE: "W"}

    def __init__(self) -> None:
        """空の 8x8 盤面を作成します"""
        self._grid: list[list[Stone]] = [
            [Stone.EMPTY for _ in range(BOARD_SIZE)] for _ in range(BOARD_SIZE)
        ]

    @classmethod
    def initial_standard(cls) -> "Board":
        """
        標準の初期配置を作成

        中央4マス: (3,3)と(4,4)が白、(3,4)と(4,3)が黒
        """
        board = cls()
        mid = BOARD_SIZE // 2
        board._grid[mid - 1][mid - 1] = Stone.WHITE
        board._grid[mid][mid] = Stone.WHITE
        board._grid[mid - 1][mid] = Stone.BLACK
        board._grid[mid][mid - 1] = Stone.BLACK
        return board

    @classmethod
    def from_strings(cls, rows: list[str]) -> "Board":
        """
        テキストから盤面を作成（局面の構築・テスト用）

        各行は 'B'（黒）、'W'（白）、'.'（空）の8文字。空白は無視されます。

        Args:
            rows: 8行の文字列

        Raises:
            ValueError: 行数・列数・文字が不正な場合
        """
        if len(rows) != BOARD_SIZE:
            raise ValueError(f"expected {BOARD_SIZE} rows, got {len(rows)}")

        lookup = {char: stone for stone, char in cls._CHARS.items()}
        board = cls()
        for r, line in enumerate(rows):
            cells = line.replace(" ", "")
            if len(cells) != BOARD_SIZE:
                raise ValueError(f"row {r} must have {BOARD_SIZE} cells: {line!r}")
            for c, char in enumerate(cells):
                if char not in lookup:
                    raise ValueError(f"unknown cell {char!r} at ({r}, {c})")
                board._grid[r][c] = lookup[char]
        return board

    @property
    def size(self) -> int:
        """盤面の一辺"""
        return BOARD_SIZE

    def is_within_bounds(self, row: int, col: int) -> bool:
        """座標が盤面内かどうかを判定"""
        return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE

    def get_stone(self, row: int, col: int) -> Stone:
        """
        指定座標の石を取得

        Raises:
            BoardIndexError: 座標が盤面外の場合
        """
        if not self.is_within_bounds(row, col):
            raise BoardIndexError(f"({row}, {col}) is outside the board")
        return self._grid[row][col]

    def is_empty(self, row: int, col: int) -> bool:
        """指定座標が空かどうかを判定"""
        return self.get_stone(row, col) == Stone.EMPTY

    def count(self, stone: Stone) -> int:
        """指定した石の数を数える"""
        return sum(row.count(stone) for row in self._grid)

    def copy(self) -> "Board":
        """盤面のコピーを作成"""
        new_board = Board()
        new_board._grid = [row[:] for row in self._grid]
        return new_board

    def _set_stone(self, row: int, col: int, stone: Stone) -> None:
        # ReversiRule.apply_move 専用
        self._grid[row][col] = stone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._grid == other._grid

    def __str__(self) -> str:
        return "\n".join(
            " ".join(self._CHARS[stone] for stone in row) for row in self._grid
        )


class ReversiRule:
    """
    リバーシのルール

    - 盤面: 8x8、標準初期配置のみ
    - 合法手: 相手の石を1つ以上挟める空きマス
    - 着手: 置いた石と、挟んだ全方向の石を自分の色にする
    - 勝敗: 双方とも打てなくなった時点の石数で判定
    """

    @property
    def rule_name(self) -> str:
        return "Reversi (8x8)"

    def create_board(self) -> Board:
        """このルール用の初期盤面を生成"""
        return Board.initial_standard()

    def _collect_line(
        self,
        board: Board,
        row: int,
        col: int,
        dr: int,
        dc: int,
        stone: Stone
    ) -> list[Position]:
        """1方向に挟める石を集める（挟めなければ空リスト）"""
        opponent = stone.opponent()
        line: list[Position] = []
        r, c = row + dr, col + dc
        while board.is_within_bounds(r, c) and board.get_stone(r, c) == opponent:
            line.append(Position(r, c))
            r += dr
            c += dc
        if line and board.is_within_bounds(r, c) and board.get_stone(r, c) == stone:
            return line
        return []

    def find_flips(self, board: Board, position: Position, stone: Stone) -> list[Position]:
        """
        指定座標に置いた場合に返る石を列挙

        8方向をDIRECTIONSの順で調べ、有効な方向の石を連結して返します。

        Args:
            board: 現在の盤面
            position: 置く座標
            stone: 置く石

        Returns:
            返る石の座標リスト（置けない場合は空リスト）
        """
        if not board.is_within_bounds(position.row, position.col):
            return []
        if not board.is_empty(position.row, position.col):
            return []

        flips: list[Position] = []
        for dr, dc in DIRECTIONS:
            flips.extend(self._collect_line(board, position.row, position.col, dr, dc, stone))
        return flips

    def is_valid_move(self, board: Board, row: int, col: int, stone: Stone) -> bool:
        """指定の手が合法かどうかを判定"""
        return bool(self.find_flips(board, Position(row, col), stone))

    def get_legal_moves(self, board: Board, stone: Stone) -> dict[Position, Move]:
        """
        現在の盤面で合法な全ての手を返す

        盤面を行優先（row-major）で走査するため、dictの順序は決定的です。
        合法手がない場合は空のdictを返します（エラーではありません）。

        Args:
            board: 現在の盤面
            stone: 次に置く石

        Returns:
            座標 -> Move のdict
        """
        moves: dict[Position, Move] = {}
        for row in range(BOARD_SIZE):
            for col in range(BOARD_SIZE):
                position = Position(row, col)
                flips = self.find_flips(board, position, stone)
                if flips:
                    moves[position] = Move(position, tuple(flips))
        return moves

    def has_legal_move(self, board: Board, stone: Stone) -> bool:
        """1手でも打てるかどうか"""
        for row in range(BOARD_SIZE):
            for col in range(BOARD_SIZE):
                if self.find_flips(board, Position(row, col), stone):
                    return True
        return False

    def apply_move(self, board: Board, move: Move, stone: Stone) -> Board:
        """
        着手を適用した新しい盤面を返す（入力の盤面は変更しない）

        Args:
            board: 現在の盤面
            move: get_legal_moves(board, stone) から得たMove
            stone: 置く石

        Returns:
            着手後の盤面

        Raises:
            InvalidMoveError: moveがこの盤面・手番の合法手と一致しない場合
        """
        expected = self.find_flips(board, move.position, stone)
        if not expected or tuple(expected) != move.flips:
            raise InvalidMoveError(
                f"{stone.name} cannot play {move.position} with flips {move.flips}"
            )

        new_board = board.copy()
        new_board._set_stone(move.position.row, move.position.col, stone)
        for flipped in move.flips:
            new_board._set_stone(flipped.row, flipped.col, stone)
        return new_board

    def count_stones(self, board: Board) -> Score:
        """盤面の石数を集計"""
        return Score(black=board.count(Stone.BLACK), white=board.count(Stone.WHITE))

    def judge(self, board: Board) -> GameStatus:
        """
        石数で勝敗を判定

        終局した盤面に対して呼びます。多い方が勝ち、同数は引き分け。
        """
        score = self.count_stones(board)
        if score.black > score.white:
            return GameStatus.BLACK_WIN
        if score.white > score.black:
            return GameStatus.WHITE_WIN
        return GameStatus.DRAW


@dataclass(frozen=True)
class HistorySnapshot:
    """着手直前のゲーム状態（Undo用）"""
    board: Board
    current_turn: Stone
    last_move: Optional[Position]
    opponent_mode: OpponentMode


@dataclass
class HistoryStack:
    """スナップショットのスタック"""
    _snapshots: list[HistorySnapshot] = field(default_factory=list)

    def push(self, snapshot: HistorySnapshot) -> None:
        self._snapshots.append(snapshot)

    def pop(self) -> Optional[HistorySnapshot]:
        """最後のスナップショットを取り出す（空ならNone）"""
        if not self._snapshots:
            return None
        return self._snapshots.pop()

    def clear(self) -> None:
        self._snapshots.clear()

    @property
    def is_empty(self) -> bool:
        return not self._snapshots

    def __len__(self) -> int:
        return len(self._snapshots)


class GameEngine:
    """
    ゲーム進行を管理するコントローラ/ファサードクラス

    責務:
    - 手番管理（パス、終局判定を含む）
    - ルールと盤面の連携
    - Undo履歴の管理
    - Observerパターンによる状態変化の通知

    外部（GUIやAI）からは、このクラスのメソッドのみを通じて
    ゲームを操作します。CPUの思考待ち（遅延）はGameSessionの責務です。
    """

    def __init__(
        self,
        rule: Optional[ReversiRule] = None,
        opponent_mode: OpponentMode = OpponentMode.HUMAN,
        automated_side: Stone = Stone.WHITE
    ) -> None:
        """
        ゲームエンジンを初期化

        Args:
            rule: 使用するルール（省略時はReversiRule）
            opponent_mode: 対戦モード
            automated_side: CPUが担当する石の色（デフォルトは白）
        """
        if automated_side == Stone.EMPTY:
            raise ValueError("automated_side must be BLACK or WHITE")

        self._rule = rule or ReversiRule()
        self._opponent_mode = opponent_mode
        self._automated_side = automated_side
        self._listeners: list[GameEventCallback] = []
        self._history = HistoryStack()
        self._board = self._rule.create_board()
        self._current_turn = Stone.BLACK  # 黒先手
        self._last_move: Optional[Position] = None
        self._status = GameStatus.ONGOING

    @property
    def board(self) -> Board:
        """現在の盤面（読み取り専用のコピーを返す）"""
        return self._board.copy()

    @property
    def rule(self) -> ReversiRule:
        """使用中のルール"""
        return self._rule

    @property
    def current_turn(self) -> Stone:
        """現在の手番"""
        return self._current_turn

    @property
    def last_move(self) -> Optional[Position]:
        """最後に打たれた座標"""
        return self._last_move

    @property
    def status(self) -> GameStatus:
        """ゲームの状態"""
        return self._status

    @property
    def is_game_over(self) -> bool:
        """ゲームが終了しているか"""
        return self._status != GameStatus.ONGOING

    @property
    def opponent_mode(self) -> OpponentMode:
        return self._opponent_mode

    @property
    def automated_side(self) -> Stone:
        return self._automated_side

    @property
    def is_automated_turn(self) -> bool:
        """CPUの手番か（CPU対戦モードかつ進行中）"""
        return (
            self._opponent_mode == OpponentMode.AUTOMATED
            and not self.is_game_over
            and self._current_turn == self._automated_side
        )

    @property
    def can_undo(self) -> bool:
        return not self._history.is_empty

    @property
    def history_size(self) -> int:
        return len(self._history)

    def add_listener(self, callback: GameEventCallback) -> None:
        """
        イベントリスナーを登録（Observerパターン）

        登録されたコールバックは、以下のイベント発生時に呼ばれます:
        - MOVE_PLAYED: 石が置かれた時（flipsに返った石）
        - PASS: 打てない側がパスした時
        - GAME_OVER: ゲームが終了した時
        - GAME_RESET: 新しいゲームが始まった時
        - UNDO: 待ったで盤面が戻った時
        - MODE_CHANGED: 対戦モードが変わった時

        Args:
            callback: イベント発生時に呼ばれるコールバック関数
        """
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: GameEventCallback) -> bool:
        """
        イベントリスナーを解除

        Returns:
            解除できたらTrue、存在しなければFalse
        """
        if callback in self._listeners:
            self._listeners.remove(callback)
            return True
        return False

    def _notify_listeners(self, event: GameEvent) -> None:
        """全リスナーにイベントを通知"""
        for listener in self._listeners:
            try:
                listener(event)
            except Exception as e:
                # リスナーの例外がゲームロジックに影響しないようにする
                print(f"Listener error: {e}")

    def new_game(self) -> None:
        """
        ゲームをリセットして初期状態に戻す

        対戦モードは維持されます。
        """
        self._board = self._rule.create_board()
        self._current_turn = Stone.BLACK
        self._last_move = None
        self._status = GameStatus.ONGOING
        self._history.clear()

        self._notify_listeners(GameEvent(
            event_type="GAME_RESET",
            status=GameStatus.ONGOING,
            message="New game started"
        ))

    def load_position(self, board: Board, current_turn: Stone) -> None:
        """
        任意の局面から開始する（局面検討・テスト用）

        履歴はクリアされます。どちらも打てない局面なら即座に終局します。
        """
        if current_turn == Stone.EMPTY:
            raise ValueError("current_turn must be BLACK or WHITE")

        self._board = board.copy()
        self._current_turn = current_turn
        self._last_move = None
        self._status = GameStatus.ONGOING
        self._history.clear()

        self._notify_listeners(GameEvent(
            event_type="GAME_RESET",
            status=GameStatus.ONGOING,
            message="Position loaded"
        ))

        if not self._rule.has_legal_move(self._board, current_turn):
            self._resolve_turn()

    def set_opponent_mode(self, mode: OpponentMode) -> None:
        """
        対戦モードを変更（進行中のゲームは維持）

        CPUの手番になった場合の着手はGameSessionが行います。
        """
        if mode == self._opponent_mode:
            return
        self._opponent_mode = mode
        self._notify_listeners(GameEvent(
            event_type="MODE_CHANGED",
            status=self._status,
            message=f"Opponent mode: {mode.name}"
        ))

    def legal_moves(self) -> dict[Position, Move]:
        """現在の手番の合法手"""
        if self.is_game_over:
            return {}
        return self._rule.get_legal_moves(self._board, self._current_turn)

    def is_legal_move(self, row: int, col: int) -> bool:
        """指定座標が現在の手番の合法手か（ヒント表示用）"""
        if self.is_game_over:
            return False
        return self._rule.is_valid_move(self._board, row, col, self._current_turn)

    def get_stone_at(self, row: int, col: int) -> Stone:
        """指定座標の石を取得（読み取り専用アクセス）"""
        return self._board.get_stone(row, col)

    def score(self) -> Score:
        """現在の石数"""
        return self._rule.count_stones(self._board)

    def result(self) -> Optional[GameResult]:
        """終局していれば結果を返す（進行中はNone）"""
        if not self.is_game_over:
            return None
        score = self.score()
        return GameResult(self._status, score.black, score.white)

    def attempt_move(self, row: int, col: int) -> MoveResult:
        """
        人間の入力を受け付ける唯一の入口

        盤面外、既に石がある、挟めない、終局後、CPUの手番中の入力は
        例外を出さずに無視します（applied=False）。

        Args:
            row: 行
            col: 列

        Returns:
            MoveResult
        """
        if self.is_automated_turn:
            return MoveResult(applied=False)
        return self.play_move(Position(row, col))

    def play_move(self, position: Position) -> MoveResult:
        """
        現在の手番のプレイヤーが指定座標に石を置く

        CPUの着手やAI同士の対戦ではこちらを直接呼びます。
        不正な手は無視されます（applied=False）。
        """
        if self.is_game_over:
            return MoveResult(applied=False)

        move = self.legal_moves().get(position)
        if move is None:
            return MoveResult(applied=False)

        stone = self._current_turn
        self._history.push(HistorySnapshot(
            board=self._board.copy(),
            current_turn=stone,
            last_move=self._last_move,
            opponent_mode=self._opponent_mode,
        ))

        self._board = self._rule.apply_move(self._board, move, stone)
        self._last_move = position
        self._current_turn = stone.opponent()

        self._notify_listeners(GameEvent(
            event_type="MOVE_PLAYED",
            position=position,
            stone=stone,
            status=self._status,
            flips=move.flips,
            message=f"{stone.name} played at ({position.row}, {position.col})"
        ))

        return self._resolve_turn()

    def _resolve_turn(self) -> MoveResult:
        """手番交代後のパス・終局判定"""
        side = self._current_turn
        if self._rule.has_legal_move(self._board, side):
            return MoveResult(applied=True)

        if not self._rule.has_legal_move(self._board, side.opponent()):
            self._status = self._rule.judge(self._board)
            result = self.result()
            self._notify_listeners(GameEvent(
                event_type="GAME_OVER",
                position=self._last_move,
                status=self._status,
                message=result.summary if result else ""
            ))
            return MoveResult(applied=True, terminal=True)

        # パス: 打てる側に手番を戻す
        self._current_turn = side.opponent()
        self._notify_listeners(GameEvent(
            event_type="PASS",
            stone=side,
            status=self._status,
            message=f"{side.name.capitalize()} has no legal moves and passes"
        ))
        return MoveResult(applied=True, passed=side)

    def undo(self) -> bool:
        """
        1手戻す（待った）

        CPU対戦モードでは、戻した結果がCPUの手番になる場合はもう1手戻し、
        人間の手番に返します。

        Returns:
            戻せたらTrue、履歴が空ならFalse
        """
        snapshot = self._history.pop()
        if snapshot is None:
            return False

        if (
            self._opponent_mode == OpponentMode.AUTOMATED
            and snapshot.current_turn == self._automated_side
            and not self._history.is_empty
        ):
            snapshot = self._history.pop()

        self._board = snapshot.board.copy()
        self._current_turn = snapshot.current_turn
        self._last_move = snapshot.last_move
        self._status = GameStatus.ONGOING

        self._notify_listeners(GameEvent(
            event_type="UNDO",
            position=self._last_move,
            stone=self._current_turn,
            status=self._status,
            message="Move undone"
        ))
        return True

