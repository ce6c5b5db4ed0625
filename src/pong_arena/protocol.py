"""
protocol.py: Line framing between the match server and its client.

Client to server:
    start <mode>            once, right after connecting
    Move: <direction>       any time while the match runs

Server to client, once per tick:
    a five line state frame (horizontal, vertical, ballx, bally, countdown),
    or a terminal line: "win", "win <reward>" or "lose".
    "give me secret" is sent once, ahead of one state frame.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from .data_models import ClientFrame, ClientStatus, Command, GameState, Mode, Outcome

START_MARKER = "start"
MOVE_PREFIX = "Move"
WIN = "win"
LOSE = "lose"
SECRET_REQUEST = "give me secret"

FRAME_KEYS = ("horizontal", "vertical", "ballx", "bally", "countdown")

# Opaque per-mode payloads appended to the win line.
REWARD_TOKENS: Dict[Mode, str] = {
    Mode.FAST: "R3W4RD{f4st_h4nds_st34dy_3y3s}",
    Mode.DOUBLE: "R3W4RD{tw0_b4lls_0n3_p4ddl3}",
}

DIRECTION_NAMES = {
    Command.UP: "up",
    Command.DOWN: "down",
    Command.LEFT: "left",
    Command.RIGHT: "right",
}


class ProtocolError(ConnectionError):
    """A match connection failed; ends that match only."""


class HandshakeReadFailure(ProtocolError):
    pass


class CommandReadFailure(ProtocolError):
    pass


class StateWriteFailure(ProtocolError):
    pass


def clean_line(data: bytes) -> str:
    """Decodes one raw line, dropping the terminator and NUL padding."""
    return data.decode("utf-8", errors="replace").rstrip("\r\n").replace("\x00", "")


# ---------- Client -> Server ----------

def encode_handshake(mode: str) -> bytes:
    return f"{START_MARKER} {mode}\n".encode("utf-8")


def encode_move(command: Command) -> bytes:
    return f"{MOVE_PREFIX}: {DIRECTION_NAMES[command]}\n".encode("utf-8")


def parse_command(line: str) -> Command:
    """
    Parses a "Move: <direction>" line.

    Never rejects input: anything that does not mention up, down or left
    moves right.
    """
    _, sep, rest = line.partition(": ")
    text = rest if sep else line
    if "up" in text:
        return Command.UP
    if "down" in text:
        return Command.DOWN
    if "left" in text:
        return Command.LEFT
    return Command.RIGHT


# ---------- Server -> Client ----------

def encode_state(state: GameState, tick_rate: int) -> bytes:
    snapshot = state.to_client_state(tick_rate)
    lines = []
    for key in FRAME_KEYS:
        value = snapshot[key]
        if isinstance(value, list):
            value = " ".join(str(v) for v in value)
        lines.append(f"{key}: {value}\n")
    return "".join(lines).encode("utf-8")


def encode_win(mode: Mode) -> bytes:
    reward = REWARD_TOKENS.get(mode)
    if reward is None:
        return f"{WIN}\n".encode("utf-8")
    return f"{WIN} {reward}\n".encode("utf-8")


def encode_lose() -> bytes:
    return f"{LOSE}\n".encode("utf-8")


def encode_secret_request() -> bytes:
    return f"{SECRET_REQUEST}\n".encode("utf-8")


def encode_outcome(state: GameState, outcome: Outcome, tick_rate: int) -> bytes:
    """The single message a tick produces."""
    if outcome == Outcome.WIN:
        return encode_win(state.mode)
    if outcome == Outcome.LOSE:
        return encode_lose()
    return encode_state(state, tick_rate)


# ---------- Client-side decoding ----------

class EventKind(Enum):
    STATE = "state"
    WIN = "win"
    LOSE = "lose"
    SECRET_REQUEST = "secret_request"


@dataclass
class ServerEvent:
    kind: EventKind
    frame: Optional[ClientFrame] = None
    reward: Optional[str] = None


def _parse_ints(text: str) -> List[int]:
    values = []
    for part in text.split():
        try:
            values.append(int(part))
        except ValueError:
            values.append(0)
    return values or [0]


class FrameDecoder:
    """Turns server lines into events, buffering partial state frames."""

    def __init__(self):
        self._values: List[List[int]] = []

    def feed(self, line: str) -> Optional[ServerEvent]:
        if line == WIN or line.startswith(WIN + " "):
            reward = line[len(WIN) + 1:] or None
            return ServerEvent(EventKind.WIN, reward=reward)
        if line == LOSE:
            return ServerEvent(EventKind.LOSE)
        if line == SECRET_REQUEST:
            return ServerEvent(EventKind.SECRET_REQUEST)

        _, _, value = line.partition(": ")
        self._values.append(_parse_ints(value))
        if len(self._values) < len(FRAME_KEYS):
            return None

        horizontal, vertical, ballx, bally, countdown = self._values
        self._values = []
        frame = ClientFrame(
            status=ClientStatus.PLAYING,
            horizontal=horizontal[0],
            vertical=vertical[0],
            ballx=ballx,
            bally=bally,
            countdown=countdown[0],
        )
        return ServerEvent(EventKind.STATE, frame=frame)
