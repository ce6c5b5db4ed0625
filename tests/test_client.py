from pong_arena.client import FrameStore, NetworkClient
from pong_arena.data_models import ClientStatus, Command


def test_snapshot_is_a_private_copy():
    store = FrameStore()
    store.update(ballx=[1, 2], bally=[3, 4])

    snapshot = store.snapshot()
    snapshot.ballx.append(9)

    assert store.snapshot().ballx == [1, 2]


def test_finished_match_is_not_marked_disconnected():
    store = FrameStore()
    store.update(status=ClientStatus.WIN)
    store.mark_disconnected()
    assert store.snapshot().status == ClientStatus.WIN

    fresh = FrameStore()
    fresh.mark_disconnected()
    assert fresh.snapshot().status == ClientStatus.DISCONNECTED


def test_client_handshake_frames_and_win(socket_pair):
    server_side, client_side = socket_pair
    secret_requests = []
    net = NetworkClient("test", 0, mode="fast", sock=client_side,
                        on_secret_request=lambda: secret_requests.append(True))

    assert net.connect()
    server_reader = server_side.makefile("rb")
    assert server_reader.readline() == b"start fast\n"

    server_side.sendall(
        b"give me secret\n"
        b"horizontal: 5\nvertical: 6\nballx: 7\nbally: 8\ncountdown: 9\n"
        b"win R3W4RD{test}\n"
    )
    net.start()
    net.network_thread.join(timeout=2)

    frame = net.fetch_frame()
    assert frame.status == ClientStatus.WIN
    assert frame.reward == "R3W4RD{test}"
    assert (frame.horizontal, frame.vertical, frame.countdown) == (5, 6, 9)
    assert (frame.ballx, frame.bally) == ([7], [8])
    assert secret_requests == [True]

    server_reader.close()
    net.stop()


def test_client_sees_lose(socket_pair):
    server_side, client_side = socket_pair
    net = NetworkClient("test", 0, sock=client_side)
    assert net.connect()

    server_side.sendall(b"lose\n")
    net.start()
    net.network_thread.join(timeout=2)

    assert net.fetch_frame().status == ClientStatus.LOSE
    net.stop()


def test_server_hangup_marks_disconnected(socket_pair):
    server_side, client_side = socket_pair
    net = NetworkClient("test", 0, sock=client_side)
    assert net.connect()

    server_side.close()
    net.start()
    net.network_thread.join(timeout=2)

    assert net.fetch_frame().status == ClientStatus.DISCONNECTED
    net.stop()


def test_send_move_writes_a_command_line(socket_pair):
    server_side, client_side = socket_pair
    net = NetworkClient("test", 0, sock=client_side)
    assert net.connect()

    assert net.send_move(Command.UP)
    assert not net.send_move(Command.NONE)

    reader = server_side.makefile("rb")
    assert reader.readline() == b"start default\n"
    assert reader.readline() == b"Move: up\n"
    reader.close()
    net.stop()
