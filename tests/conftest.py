import os
import random
import socket
import sys

import pytest

# Ensure the src root (containing the `pong_arena` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
SRC_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..', 'src'))
if SRC_ROOT not in sys.path:
    sys.path.insert(0, SRC_ROOT)

from pong_arena.config import GameConfig
from pong_arena.data_models import GameState, Mode


@pytest.fixture()
def config():
    return GameConfig()


@pytest.fixture()
def covered_config():
    # Paddles almost as long as the arena: every bounce is covered
    return GameConfig(paddle_width=35, paddle_height=17)


@pytest.fixture()
def rng():
    return random.Random(1234)


@pytest.fixture()
def make_state():
    def _make(config, balls, horizontal=0.0, vertical=0.0, countdown=100, mode=Mode.DEFAULT):
        return GameState(
            mode=mode,
            horizontal=horizontal,
            vertical=vertical,
            balls=balls,
            countdown=countdown,
            ball_velocity_x=config.ball_velocity_x,
            ball_velocity_y=config.ball_velocity_y,
            paddle_velocity_x=config.paddle_velocity_x,
            paddle_velocity_y=config.paddle_velocity_y,
        )
    return _make


@pytest.fixture()
def socket_pair():
    server_side, client_side = socket.socketpair()
    client_side.settimeout(5.0)
    yield server_side, client_side
    server_side.close()
    client_side.close()
