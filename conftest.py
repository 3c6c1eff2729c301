"""
Pytest configuration for async tests
"""

import pytest

from game_core import Board


def pytest_configure(config):
    """pytestの設定"""
    config.addinivalue_line(
        "markers", "asyncio: mark test as an asyncio test."
    )


@pytest.fixture
def pass_board() -> Board:
    """
    黒番で、黒が(0,2)に打つと白がパスになる局面

    黒が(0,2)、(7,2)の順に打つと 6-0 で終局します。
    """
    return Board.from_strings([
        "B W . . . . . .",
        ". . . . . . . .",
        ". . . . . . . .",
        ". . . . . . . .",
        ". . . . . . . .",
        ". . . . . . . .",
        ". . . . . . . .",
        "B W . . . . . .",
    ])
