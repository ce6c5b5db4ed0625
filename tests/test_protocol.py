import pytest

from pong_arena.data_models import Ball, ClientStatus, Command, Mode, Outcome
from pong_arena.protocol import (
    REWARD_TOKENS, EventKind, FrameDecoder, clean_line, encode_handshake,
    encode_lose, encode_move, encode_outcome, encode_secret_request,
    encode_state, encode_win, parse_command
)


def test_state_frame_layout(config, make_state):
    state = make_state(config, [Ball(18.7, 9.2, 1, 1)], horizontal=17.0, vertical=8.5, countdown=3599)
    assert encode_state(state, 60) == (
        b"horizontal: 17\n"
        b"vertical: 8\n"
        b"ballx: 18\n"
        b"bally: 9\n"
        b"countdown: 60\n"
    )


def test_state_frame_lists_every_ball(config, make_state):
    balls = [Ball(9.0, 4.5, 1, 1), Ball(27.0, 13.5, -1, -1)]
    state = make_state(config, balls, countdown=0, mode=Mode.DOUBLE)
    frame = encode_state(state, 60).decode().splitlines()
    assert frame[2] == "ballx: 9 27"
    assert frame[3] == "bally: 4 13"
    assert frame[4] == "countdown: 1"


def test_win_lines_per_mode():
    assert encode_win(Mode.DEFAULT) == b"win\n"
    assert encode_win(Mode.FAST) == f"win {REWARD_TOKENS[Mode.FAST]}\n".encode()
    assert encode_win(Mode.DOUBLE) == f"win {REWARD_TOKENS[Mode.DOUBLE]}\n".encode()
    assert REWARD_TOKENS[Mode.FAST] != REWARD_TOKENS[Mode.DOUBLE]
    assert encode_win(Mode.FAST) == encode_win(Mode.FAST)


def test_terminal_and_side_lines(config, make_state):
    state = make_state(config, [Ball(18.0, 9.0, 1, 1)], mode=Mode.FAST)
    assert encode_lose() == b"lose\n"
    assert encode_secret_request() == b"give me secret\n"
    assert encode_outcome(state, Outcome.LOSE, 60) == b"lose\n"
    assert encode_outcome(state, Outcome.WIN, 60).startswith(b"win ")
    assert encode_outcome(state, Outcome.CONTINUE, 60).startswith(b"horizontal: ")


@pytest.mark.parametrize("line, expected", [
    ("Move: up", Command.UP),
    ("Move: down", Command.DOWN),
    ("Move: left", Command.LEFT),
    ("Move: right", Command.RIGHT),
    ("Move: sideways", Command.RIGHT),
    ("Move: ", Command.RIGHT),
    ("garbage", Command.RIGHT),
    ("up", Command.UP),
])
def test_parse_command_defaults_to_right(line, expected):
    assert parse_command(line) == expected


def test_move_lines_parse_back():
    assert encode_move(Command.LEFT) == b"Move: left\n"
    for command in (Command.UP, Command.DOWN, Command.LEFT, Command.RIGHT):
        assert parse_command(clean_line(encode_move(command))) == command


def test_handshake():
    assert encode_handshake("double") == b"start double\n"
    assert Mode.from_token("start double") == Mode.DOUBLE
    assert Mode.from_token("start") == Mode.DEFAULT


def test_clean_line_strips_terminators_and_nul():
    assert clean_line(b"countdown: 5\x00\x00\r\n") == "countdown: 5"


def feed_all(decoder, lines):
    return [decoder.feed(line) for line in lines]


def test_decoder_builds_frame_from_five_lines():
    decoder = FrameDecoder()
    events = feed_all(decoder, ["horizontal: 3", "vertical: 4", "ballx: 9 27", "bally: 4 13", "countdown: 12"])

    assert events[:4] == [None, None, None, None]
    event = events[4]
    assert event.kind == EventKind.STATE
    frame = event.frame
    assert frame.status == ClientStatus.PLAYING
    assert (frame.horizontal, frame.vertical, frame.countdown) == (3, 4, 12)
    assert frame.ballx == [9, 27]
    assert frame.bally == [4, 13]


def test_decoder_secret_request_does_not_break_frame():
    decoder = FrameDecoder()
    events = feed_all(decoder, ["horizontal: 1", "vertical: 2", "give me secret",
                                "ballx: 3", "bally: 4", "countdown: 5"])

    assert events[2].kind == EventKind.SECRET_REQUEST
    assert events[5].kind == EventKind.STATE
    assert events[5].frame.countdown == 5


def test_decoder_terminal_lines():
    decoder = FrameDecoder()
    plain = decoder.feed("win")
    assert plain.kind == EventKind.WIN and plain.reward is None
    rewarded = decoder.feed("win R3W4RD{x}")
    assert rewarded.kind == EventKind.WIN and rewarded.reward == "R3W4RD{x}"
    assert decoder.feed("lose").kind == EventKind.LOSE


def test_decoder_reads_garbage_numbers_as_zero():
    decoder = FrameDecoder()
    events = feed_all(decoder, ["horizontal: x", "vertical", "ballx: 1", "bally: 2", "countdown: 3"])
    frame = events[4].frame
    assert frame.horizontal == 0
    assert frame.vertical == 0
