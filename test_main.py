"""
Reversi Platform - Command Line Tests

main.py のコマンドライン引数と設定作成のテストを提供します。
"""

import pytest

from game_core import OpponentMode
from main import create_config_from_args, parse_args


class TestParseArgs:
    """コマンドライン引数のテスト"""

    def test_defaults(self):
        args = parse_args([])
        assert args.mode == "cpu"
        assert args.ai == "heuristic"
        assert args.delay == pytest.approx(0.35)
        assert args.no_hints is False

    def test_short_options(self):
        args = parse_args(["-m", "human", "-a", "random"])
        assert args.mode == "human"
        assert args.ai == "random"

    def test_invalid_mode_rejected(self):
        with pytest.raises(SystemExit):
            parse_args(["--mode", "online"])


class TestCreateConfig:
    """GameConfig作成のテスト"""

    def test_default_config(self):
        config = create_config_from_args(parse_args([]))
        assert config.opponent_mode == OpponentMode.AUTOMATED
        assert config.ai_type == "heuristic"
        assert config.think_delay == pytest.approx(0.35)
        assert config.show_hints is True

    def test_human_mode_without_hints(self):
        config = create_config_from_args(parse_args(["--mode", "human", "--no-hints"]))
        assert config.opponent_mode == OpponentMode.HUMAN
        assert config.show_hints is False

    def test_negative_delay_clamped(self):
        """負の待ち時間は0に丸める"""
        config = create_config_from_args(parse_args(["--delay", "-1"]))
        assert config.think_delay == 0.0
