"""
modes.py: Builds the initial game state for each mode.
"""

import random
from typing import Optional

from .config import GameConfig
from .constants import (
    DOUBLE_BALL_MULTIPLIER, FAST_BALL_MULTIPLIER, FAST_PADDLE_MULTIPLIER
)
from .data_models import Ball, GameState, Mode

# (ball multiplier, paddle multiplier)
VELOCITY_MULTIPLIERS = {
    Mode.DEFAULT: (1.0, 1.0),
    Mode.FAST: (FAST_BALL_MULTIPLIER, FAST_PADDLE_MULTIPLIER),
    Mode.DOUBLE: (DOUBLE_BALL_MULTIPLIER, 1.0),
}


def random_sign(rng) -> int:
    return -1 if rng.randint(0, 1) == 0 else 1


def _spawn_single(config: GameConfig, rng) -> list:
    jitter = config.ball_spawn_jitter
    x = config.arena_width // 2 + rng.randint(-jitter, jitter)
    y = config.arena_height // 2 + rng.randint(-jitter, jitter)
    return [Ball(float(x), float(y), random_sign(rng), random_sign(rng))]


def _spawn_double(config: GameConfig, rng) -> list:
    center_x = config.arena_width / 2
    center_y = config.arena_height / 2
    offset_x = config.arena_width / 4
    offset_y = config.arena_height / 4
    sign_x, sign_y = random_sign(rng), random_sign(rng)
    return [
        Ball(center_x - offset_x, center_y - offset_y, sign_x, sign_y),
        Ball(center_x + offset_x, center_y + offset_y, -sign_x, -sign_y),
    ]


def new_game(token: str, config: GameConfig, rng: Optional[random.Random] = None) -> GameState:
    """
    Creates the state of a new match from the handshake's mode token.

    Unrecognized tokens silently select the default mode.
    """
    rng = rng or random
    mode = Mode.from_token(token)
    ball_multiplier, paddle_multiplier = VELOCITY_MULTIPLIERS[mode]

    if mode == Mode.DOUBLE:
        balls = _spawn_double(config, rng)
    else:
        balls = _spawn_single(config, rng)

    return GameState(
        mode=mode,
        horizontal=(config.arena_width - config.paddle_width) / 2,
        vertical=(config.arena_height - config.paddle_height) / 2,
        balls=balls,
        countdown=config.total_ticks,
        ball_velocity_x=config.ball_velocity_x * ball_multiplier,
        ball_velocity_y=config.ball_velocity_y * ball_multiplier,
        paddle_velocity_x=config.paddle_velocity_x * paddle_multiplier,
        paddle_velocity_y=config.paddle_velocity_y * paddle_multiplier,
    )
