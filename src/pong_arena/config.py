"""
config.py: Startup configuration for the server and client.

Built once from the command line and passed explicitly into the match loop
and the mode factory.
"""

import argparse
import logging
from dataclasses import dataclass, field
from typing import Optional

from .constants import (
    ARENA_HEIGHT, ARENA_WIDTH, BALL_SPAWN_JITTER, BALL_SPEED, BIND_ADDR,
    GAME_PORT, LOG_FILE, MATCH_DURATION, PADDLE_HEIGHT, PADDLE_VELOCITY_X,
    PADDLE_VELOCITY_Y, PADDLE_WIDTH, SECRET_REQUEST_TIME, SERVER_ADDR,
    TICK_RATE
)


@dataclass(frozen=True)
class GameConfig:
    """Arena geometry, timing and base velocities of one match."""
    arena_width: int = ARENA_WIDTH
    arena_height: int = ARENA_HEIGHT
    paddle_width: int = PADDLE_WIDTH
    paddle_height: int = PADDLE_HEIGHT
    tick_rate: int = TICK_RATE
    duration: int = MATCH_DURATION
    secret_request_time: int = SECRET_REQUEST_TIME
    paddle_velocity_x: float = PADDLE_VELOCITY_X
    paddle_velocity_y: float = PADDLE_VELOCITY_Y
    ball_speed: float = BALL_SPEED
    ball_spawn_jitter: int = BALL_SPAWN_JITTER

    def __post_init__(self):
        if self.arena_width < 1 or self.arena_height < 1:
            raise ValueError(
                f"arena must be at least 1x1, got {self.arena_width}x{self.arena_height}")
        if not 0 < self.paddle_width < self.arena_width:
            raise ValueError(
                f"paddle width {self.paddle_width} must be in (0, {self.arena_width})")
        if not 0 < self.paddle_height < self.arena_height:
            raise ValueError(
                f"paddle height {self.paddle_height} must be in (0, {self.arena_height})")
        if self.tick_rate < 1:
            raise ValueError(f"tick rate must be positive, got {self.tick_rate}")
        if self.duration < 1:
            raise ValueError(f"duration must be positive, got {self.duration}")
        if not 1 <= self.secret_request_time <= self.duration:
            raise ValueError(
                f"secret request time {self.secret_request_time} must be in [1, {self.duration}]")

    @property
    def tick_time(self) -> float:
        return 1.0 / self.tick_rate

    @property
    def total_ticks(self) -> int:
        return self.duration * self.tick_rate

    @property
    def secret_tick(self) -> int:
        """Countdown value at which the secret request is sent."""
        return self.secret_request_time * self.tick_rate - 1

    @property
    def ball_velocity_x(self) -> float:
        return self.ball_speed * self.paddle_width / self.tick_rate

    @property
    def ball_velocity_y(self) -> float:
        return self.ball_speed * self.paddle_height / self.tick_rate


@dataclass(frozen=True)
class ServerConfig:
    host: str = BIND_ADDR
    port: int = GAME_PORT
    log_file: Optional[str] = LOG_FILE
    log_level: int = logging.INFO
    game: GameConfig = field(default_factory=GameConfig)


def build_server_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Authoritative pong arena server.")
    parser.add_argument("--bind-addr", default=BIND_ADDR, help="bind address of game server")
    parser.add_argument("--port", type=int, default=GAME_PORT, help="port number of game server")
    parser.add_argument("--tick-rate", type=int, default=TICK_RATE)
    parser.add_argument("--duration", type=int, default=MATCH_DURATION,
                        help="match length in seconds")
    parser.add_argument("--secret-time", type=int, default=SECRET_REQUEST_TIME,
                        help="seconds left when the secret request is sent")
    parser.add_argument("--log-file", default=LOG_FILE,
                        help="log file path, empty to log to the console only")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def server_config_from_args(args: argparse.Namespace) -> ServerConfig:
    game = GameConfig(
        tick_rate=args.tick_rate,
        duration=args.duration,
        secret_request_time=args.secret_time,
    )
    return ServerConfig(
        host=args.bind_addr,
        port=args.port,
        log_file=args.log_file or None,
        log_level=getattr(logging, args.log_level),
        game=game,
    )


def build_client_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Pong arena client.")
    parser.add_argument("--addr", default=SERVER_ADDR, help="IP address of game server")
    parser.add_argument("--port", type=int, default=GAME_PORT, help="port number of game server")
    parser.add_argument("--mode", default="default", help="default, fast or double")
    return parser
