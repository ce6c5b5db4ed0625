#!/usr/bin/env python3
"""
Pong arena server.
Every connection plays one match: a tick loop that owns the game state and
a reader thread that feeds it the player's latest command.
"""

import logging
import socket
import threading
import time
from typing import List, Optional, Set, Tuple

from .config import GameConfig, ServerConfig, build_server_parser, server_config_from_args
from .constants import BUFFER_SIZE
from .data_models import Command, GameState, MatchPhase, Outcome
from .modes import new_game
from .physics_server import ServerEngine
from .protocol import (
    START_MARKER, CommandReadFailure, HandshakeReadFailure, StateWriteFailure,
    clean_line, encode_outcome, encode_secret_request, parse_command
)

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_file: Optional[str] = None, level: int = logging.INFO):
    """Logs to the console and, when given, to a log file."""
    formatter = logging.Formatter(LOG_FORMAT)
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    for handler in handlers:
        handler.setFormatter(formatter)
    logging.basicConfig(level=level, handlers=handlers, force=True)


class PendingCommand:
    """Single-slot, last-write-wins command shared by the reader and the tick loop."""

    def __init__(self):
        self._lock = threading.Lock()
        self._command = Command.NONE

    def put(self, command: Command):
        with self._lock:
            self._command = command

    def take(self) -> Command:
        """Returns the latest command and clears the slot."""
        with self._lock:
            command, self._command = self._command, Command.NONE
        return command


class Match:
    """One game session bound to a single client connection."""

    def __init__(self, conn: socket.socket, addr: Tuple[str, int],
                 config: GameConfig, rng=None):
        self.conn = conn
        self.addr = addr
        self.config = config
        self.rng = rng

        self.engine = ServerEngine(config=config)
        self.pending = PendingCommand()
        self.phase = MatchPhase.AWAITING_HANDSHAKE
        self.state: Optional[GameState] = None

        # Set once the connection is known to be dead
        self.disconnected = threading.Event()
        self._reader = conn.makefile("rb")
        self._ingest_thread: Optional[threading.Thread] = None

    def run(self):
        """Plays the match to its end. Never raises on connection failures."""
        try:
            try:
                line = self._read_line(HandshakeReadFailure)
            except HandshakeReadFailure as e:
                self.phase = MatchPhase.DISCONNECTED
                logger.info("no handshake from %s: %s", self.addr, e)
                return

            if not line.startswith(START_MARKER):
                logger.warning("handshake from %s lacks start marker: %r", self.addr, line)
            self.state = new_game(line, self.config, self.rng)
            logger.info("start game, remote = %s, mode = %s", self.addr, self.state.mode.value)

            self._ingest_thread = threading.Thread(target=self._ingest_commands, daemon=True)
            self._ingest_thread.start()

            try:
                self._run_loop()
            except StateWriteFailure as e:
                self.phase = MatchPhase.DISCONNECTED
                logger.info("lost connection to %s: %s", self.addr, e)

            logger.info("end game, remote = %s, result = %s, ticks = %d",
                        self.addr, self.phase.value, self.engine.tick_count)
        finally:
            self._close()

    def abort(self):
        """Ends the match from outside by killing its connection."""
        self.disconnected.set()
        self._shutdown()

    def tick(self) -> Tuple[List[bytes], Outcome]:
        """
        Runs one simulation step and returns the messages it produces,
        without touching the connection.
        """
        command = self.pending.take()
        outcome = self.engine.step(self.state, command)

        messages = []
        if self.state.countdown == self.config.secret_tick:
            messages.append(encode_secret_request())
        messages.append(encode_outcome(self.state, outcome, self.config.tick_rate))
        return messages, outcome

    def _run_loop(self):
        self.phase = MatchPhase.RUNNING
        elapsed = 0.0
        while True:
            # 1. Wait for the tick boundary; a dead reader wakes us early
            if self.disconnected.wait(max(self.config.tick_time - elapsed, 0.0)):
                self.phase = MatchPhase.DISCONNECTED
                return
            start_time = time.monotonic()

            # 2. Simulate and send
            messages, outcome = self.tick()
            for message in messages:
                self._send(message)

            # 3. Terminal states
            if outcome == Outcome.WIN:
                self.phase = MatchPhase.WON
                return
            if outcome == Outcome.LOSE:
                self.phase = MatchPhase.LOST
                return

            elapsed = time.monotonic() - start_time

    def _ingest_commands(self):
        """Reader thread: keeps the pending slot at the latest command."""
        while True:
            try:
                line = self._read_line(CommandReadFailure)
            except CommandReadFailure as e:
                logger.debug("stop reading commands from %s: %s", self.addr, e)
                # A peer that stops sending is treated as gone, half-closed or not
                self.disconnected.set()
                return
            self.pending.put(parse_command(line))

    def _read_line(self, failure: type) -> str:
        try:
            data = self._reader.readline(BUFFER_SIZE)
        except (OSError, ValueError) as e:
            raise failure(f"read from {self.addr} failed: {e}") from e
        if not data:
            raise failure(f"{self.addr} closed the connection")
        return clean_line(data)

    def _send(self, message: bytes):
        try:
            self.conn.sendall(message)
        except OSError as e:
            raise StateWriteFailure(f"write to {self.addr} failed: {e}") from e

    def _shutdown(self):
        try:
            self.conn.shutdown(socket.SHUT_RDWR)
        except OSError:
            # Peer already gone
            pass

    def _close(self):
        self._shutdown()
        if self._ingest_thread:
            self._ingest_thread.join(timeout=1.0)
        self._reader.close()
        self.conn.close()


class PongServer:
    """Accepts connections and runs an independent match for each."""

    def __init__(self, config: ServerConfig):
        self.config = config

        # Network
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.sock.bind((config.host, config.port))
        self.sock.listen()
        self.sock.settimeout(0.5)

        # Live matches
        self.matches: Set[Match] = set()
        self.matches_lock = threading.Lock()

        # Threading
        self.running = threading.Event()
        self.running.set()
        self.accept_thread = threading.Thread(target=self._accept_loop, daemon=True)

    @property
    def address(self) -> Tuple[str, int]:
        host, port = self.sock.getsockname()[:2]
        return host, port

    def start(self):
        self.accept_thread.start()

    def stop(self):
        """Stops accepting and drops every live match."""
        logger.info("Stopping server...")
        self.running.clear()
        self.accept_thread.join()
        self.sock.close()
        with self.matches_lock:
            matches = list(self.matches)
        for match in matches:
            match.abort()
        logger.info("Server stopped.")

    def _accept_loop(self):
        host, port = self.address
        logger.info("start listening game on %s:%s", host, port)
        while self.running.is_set():
            try:
                conn, addr = self.sock.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if not self.running.is_set():
                    break
                logger.error("error on accept: %s", e)
                continue

            conn.settimeout(None)
            match = Match(conn, addr, self.config.game)
            threading.Thread(target=self._run_match, args=(match,), daemon=True).start()

    def _run_match(self, match: Match):
        with self.matches_lock:
            self.matches.add(match)
        try:
            match.run()
        finally:
            with self.matches_lock:
                self.matches.discard(match)


def main(argv=None):
    args = build_server_parser().parse_args(argv)
    config = server_config_from_args(args)
    setup_logging(config.log_file, config.log_level)

    server = PongServer(config)
    try:
        server.start()
        while server.running.is_set():
            time.sleep(0.1)
    except KeyboardInterrupt:
        server.stop()


if __name__ == "__main__":
    main()
