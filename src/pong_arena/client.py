"""
client.py: Network side of the pong client.

A receive thread is the only writer of the current frame; the renderer reads
a consistent copy of it once per drawn frame.
"""

import dataclasses
import logging
import socket
import threading
from typing import Callable, Optional

from .constants import BUFFER_SIZE
from .data_models import ClientFrame, ClientStatus, Command
from .protocol import EventKind, FrameDecoder, clean_line, encode_handshake, encode_move

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT = 5.0  # seconds


class FrameStore:
    """Lock-guarded holder of the latest client frame."""

    def __init__(self):
        self._lock = threading.Lock()
        self._frame = ClientFrame()

    def update(self, **changes):
        with self._lock:
            self._frame = dataclasses.replace(self._frame, **changes)

    def mark_disconnected(self):
        """Only a match still in play can become disconnected."""
        with self._lock:
            if self._frame.status == ClientStatus.PLAYING:
                self._frame = dataclasses.replace(self._frame, status=ClientStatus.DISCONNECTED)

    def snapshot(self) -> ClientFrame:
        with self._lock:
            frame = self._frame
            return dataclasses.replace(frame, ballx=list(frame.ballx), bally=list(frame.bally))


def _ignore_secret_request():
    logger.info("Server asked for the secret side channel; not supported, ignoring.")


class NetworkClient:
    def __init__(self, host: str, port: int, mode: str = "default",
                 sock: Optional[socket.socket] = None,
                 on_secret_request: Optional[Callable[[], None]] = None):
        self.host = host
        self.port = port
        self.mode = mode
        self.sock = sock
        self.on_secret_request = on_secret_request or _ignore_secret_request

        self.frames = FrameStore()
        self.decoder = FrameDecoder()
        self._reader = None

        self.running = threading.Event()
        self.network_thread = threading.Thread(target=self._network_loop, daemon=True)

    def connect(self) -> bool:
        """Dials the server (unless a socket was given) and sends the handshake."""
        try:
            if self.sock is None:
                self.sock = socket.create_connection((self.host, self.port), timeout=CONNECT_TIMEOUT)
                self.sock.settimeout(None)
            self.sock.sendall(encode_handshake(self.mode))
        except OSError as e:
            logger.error("Could not start a game on %s:%s: %s", self.host, self.port, e)
            self.frames.mark_disconnected()
            return False
        self._reader = self.sock.makefile("rb")
        return True

    def start(self):
        self.running.set()
        self.network_thread.start()

    def stop(self):
        self.running.clear()
        if self.sock is not None:
            try:
                self.sock.shutdown(socket.SHUT_RDWR)
            except OSError:
                # Server already closed the connection
                pass
        if self.network_thread.is_alive():
            self.network_thread.join(timeout=1.0)
        if self._reader is not None:
            self._reader.close()
        if self.sock is not None:
            self.sock.close()

    def send_move(self, command: Command) -> bool:
        if self.sock is None or command == Command.NONE:
            return False
        try:
            self.sock.sendall(encode_move(command))
        except OSError as e:
            logger.info("Error sending move: %s", e)
            self.frames.mark_disconnected()
            return False
        return True

    def fetch_frame(self) -> ClientFrame:
        """Safely retrieve the latest frame."""
        return self.frames.snapshot()

    def _network_loop(self):
        """Dedicated thread applying server messages to the frame store."""
        while self.running.is_set():
            try:
                data = self._reader.readline(BUFFER_SIZE)
            except (OSError, ValueError) as e:
                logger.info("Error receiving state: %s", e)
                data = b""
            if not data:
                self.frames.mark_disconnected()
                return

            event = self.decoder.feed(clean_line(data))
            if event is None:
                continue

            if event.kind == EventKind.STATE:
                frame = event.frame
                self.frames.update(
                    horizontal=frame.horizontal,
                    vertical=frame.vertical,
                    ballx=frame.ballx,
                    bally=frame.bally,
                    countdown=frame.countdown,
                )
            elif event.kind == EventKind.SECRET_REQUEST:
                self.on_secret_request()
            elif event.kind == EventKind.WIN:
                self.frames.update(status=ClientStatus.WIN, reward=event.reward)
                return
            elif event.kind == EventKind.LOSE:
                self.frames.update(status=ClientStatus.LOSE)
                return
