"""
data_models.py: Data structures for the game state.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import List, Optional


class Mode(str, Enum):
    DEFAULT = "default"
    FAST = "fast"
    DOUBLE = "double"

    @classmethod
    def from_token(cls, token: str) -> "Mode":
        """Anything without a "fast" or "double" word plays the default mode."""
        for word in token.lower().split():
            if word == cls.FAST.value:
                return cls.FAST
            if word == cls.DOUBLE.value:
                return cls.DOUBLE
        return cls.DEFAULT


class Command(IntEnum):
    NONE = 0
    UP = 1
    DOWN = 2
    LEFT = 3
    RIGHT = 4


class Outcome(Enum):
    CONTINUE = "continue"
    WIN = "win"
    LOSE = "lose"


class MatchPhase(Enum):
    AWAITING_HANDSHAKE = "awaiting_handshake"
    RUNNING = "running"
    WON = "won"
    LOST = "lost"
    DISCONNECTED = "disconnected"


class ClientStatus(Enum):
    PLAYING = "playing"
    WIN = "win"
    LOSE = "lose"
    DISCONNECTED = "disconnected"


@dataclass
class Ball:
    x: float
    y: float
    dir_x: int  # +1 or -1
    dir_y: int  # +1 or -1


@dataclass
class GameState:
    """The authoritative match state, owned by a single match loop."""
    mode: Mode
    horizontal: float   # x of the left end of the top/bottom paddles
    vertical: float     # y of the top end of the left/right paddles
    balls: List[Ball]
    countdown: int      # remaining ticks
    ball_velocity_x: float
    ball_velocity_y: float
    paddle_velocity_x: float
    paddle_velocity_y: float

    def to_client_state(self, tick_rate: int) -> dict:
        """Integer snapshot sent to the client every tick."""
        return {
            "horizontal": int(self.horizontal),
            "vertical": int(self.vertical),
            "ballx": [int(ball.x) for ball in self.balls],
            "bally": [int(ball.y) for ball in self.balls],
            "countdown": int(self.countdown / tick_rate + 1),
        }


@dataclass
class ClientFrame:
    """Client-side copy of the last state frame received."""
    status: ClientStatus = ClientStatus.PLAYING
    horizontal: int = 0
    vertical: int = 0
    ballx: List[int] = field(default_factory=list)
    bally: List[int] = field(default_factory=list)
    countdown: int = 0
    reward: Optional[str] = None
