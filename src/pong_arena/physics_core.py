"""
physics_core.py: Deterministic paddle and ball kinematics and collision logic.
"""

from dataclasses import dataclass, field

from .config import GameConfig
from .data_models import Ball, Command, GameState


def clamp(value: float, low: float, high: float) -> float:
    return max(min(value, high), low)


@dataclass
class PhysicsCore:
    """
    Shared deterministic physics for one arena geometry.
    """
    config: GameConfig = field(default_factory=GameConfig)

    def move_paddles(self, state: GameState, command: Command):
        """Moves at most one paddle pair one step, clamped to the arena."""
        cfg = self.config
        max_horizontal = cfg.arena_width - cfg.paddle_width
        max_vertical = cfg.arena_height - cfg.paddle_height

        if command == Command.UP:
            state.vertical = clamp(state.vertical - state.paddle_velocity_y, 0, max_vertical)
        elif command == Command.DOWN:
            state.vertical = clamp(state.vertical + state.paddle_velocity_y, 0, max_vertical)
        elif command == Command.LEFT:
            state.horizontal = clamp(state.horizontal - state.paddle_velocity_x, 0, max_horizontal)
        elif command == Command.RIGHT:
            state.horizontal = clamp(state.horizontal + state.paddle_velocity_x, 0, max_horizontal)

    def move_ball(self, state: GameState, ball: Ball):
        """
        Advances one ball and bounces it off a paddle that covers it.

        A ball reaching a collision line with no paddle in the way keeps
        going and ends up out of bounds.
        """
        cfg = self.config
        right_line = cfg.arena_width - 1
        bottom_line = cfg.arena_height - 1

        # 1. Horizontal axis, against the left/right paddles
        ball.x += ball.dir_x * state.ball_velocity_x
        if ball.x >= right_line or ball.x <= 1:
            if state.vertical <= ball.y <= state.vertical + cfg.paddle_height:
                ball.dir_x *= -1
                ball.x = clamp(ball.x, 1, right_line)

        # 2. Vertical axis, against the top/bottom paddles
        ball.y += ball.dir_y * state.ball_velocity_y
        if ball.y >= bottom_line or ball.y <= 1:
            if state.horizontal <= ball.x <= state.horizontal + cfg.paddle_width:
                ball.dir_y *= -1
                ball.y = clamp(ball.y, 1, bottom_line)

    def out_of_bounds(self, ball: Ball) -> bool:
        cfg = self.config
        return (ball.x < 0 or ball.x > cfg.arena_width
                or ball.y < 0 or ball.y > cfg.arena_height)
