#!/usr/bin/env python3
"""
pong_client.py

Pygame front end: draws the last frame received from the server and turns
arrow keys into move commands.
"""

import logging

import pygame

from .client import NetworkClient
from .config import GameConfig, build_client_parser
from .data_models import ClientFrame, ClientStatus, Command

RENDER_FPS = 60
CELL_SIZE = 20
HUD_HEIGHT = 40

KEY_COMMANDS = {
    pygame.K_UP: Command.UP,
    pygame.K_DOWN: Command.DOWN,
    pygame.K_LEFT: Command.LEFT,
    pygame.K_RIGHT: Command.RIGHT,
}

BANNERS = {
    ClientStatus.WIN: "You win!",
    ClientStatus.LOSE: "You lose!",
    ClientStatus.DISCONNECTED: "Disconnected",
}

BACKGROUND = (10, 10, 30)
BORDER = (90, 90, 120)
PADDLE = (230, 230, 230)
BALL = (255, 200, 0)
TEXT = (200, 200, 200)


class PongClient:
    def __init__(self, net: NetworkClient, arena: GameConfig = GameConfig()):
        pygame.init()
        self.net = net
        self.arena = arena
        width = arena.arena_width * CELL_SIZE
        height = arena.arena_height * CELL_SIZE + HUD_HEIGHT
        self.screen = pygame.display.set_mode((width, height))
        pygame.display.set_caption(f"Pong Arena: {net.mode}")
        pygame.key.set_repeat(200, 50)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.Font(None, 32)

    def run(self):
        """The main client execution loop."""
        if not self.net.connect():
            pygame.quit()
            return
        self.net.start()

        running = True
        while running:
            self.clock.tick(RENDER_FPS)

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key in (pygame.K_ESCAPE, pygame.K_q):
                        running = False
                    elif event.key in KEY_COMMANDS:
                        self.net.send_move(KEY_COMMANDS[event.key])

            self._draw(self.net.fetch_frame())

        self.net.stop()
        pygame.quit()

    def _cell(self, x: int, y: int) -> pygame.Rect:
        return pygame.Rect(x * CELL_SIZE, HUD_HEIGHT + y * CELL_SIZE, CELL_SIZE, CELL_SIZE)

    def _draw(self, frame: ClientFrame):
        arena = self.arena
        screen = self.screen
        screen.fill(BACKGROUND)

        pygame.draw.rect(
            screen, BORDER,
            (0, HUD_HEIGHT, arena.arena_width * CELL_SIZE, arena.arena_height * CELL_SIZE), 1)

        # Top and bottom paddles
        for dx in range(arena.paddle_width):
            screen.fill(PADDLE, self._cell(frame.horizontal + dx, 0))
            screen.fill(PADDLE, self._cell(frame.horizontal + dx, arena.arena_height - 1))

        # Left and right paddles
        for dy in range(arena.paddle_height):
            screen.fill(PADDLE, self._cell(0, frame.vertical + dy))
            screen.fill(PADDLE, self._cell(arena.arena_width - 1, frame.vertical + dy))

        for x, y in zip(frame.ballx, frame.bally):
            pygame.draw.ellipse(screen, BALL, self._cell(x, y))

        # HUD
        timer = self.font.render(f"time: {frame.countdown:2d}", True, TEXT)
        screen.blit(timer, (10, 10))

        banner = BANNERS.get(frame.status)
        if banner:
            if frame.status == ClientStatus.WIN and frame.reward:
                banner = f"{banner} {frame.reward}"
            surf = self.font.render(banner, True, BALL)
            screen.blit(surf, (screen.get_width() // 2 - surf.get_width() // 2,
                               screen.get_height() // 2 - surf.get_height() // 2))

        pygame.display.flip()


def main(argv=None):
    args = build_client_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    net = NetworkClient(args.addr, args.port, mode=args.mode)
    PongClient(net).run()


if __name__ == "__main__":
    main()
