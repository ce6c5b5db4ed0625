"""
physics_server.py: The authoritative server-side world simulation.
"""

from dataclasses import dataclass

from .data_models import Command, GameState, Outcome
from .physics_core import PhysicsCore


@dataclass
class ServerEngine(PhysicsCore):
    """
    Advances a match by one tick.
    Inherits paddle and ball physics from PhysicsCore.
    """
    tick_count: int = 0

    def step(self, state: GameState, command: Command) -> Outcome:
        """
        The main authoritative simulation step.
        Mutates the game state and reports whether the match is over.
        """
        self.tick_count += 1

        # 1. Apply the player's command
        self.move_paddles(state, command)

        # 2. Move balls and flag the ones that escaped
        escaped = False
        for ball in state.balls:
            self.move_ball(state, ball)
            if self.out_of_bounds(ball):
                escaped = True

        # 3. Clock
        state.countdown -= 1

        # 4. Surviving the clock wins even if a ball escaped on the last tick
        if state.countdown < 0:
            return Outcome.WIN
        if escaped:
            return Outcome.LOSE
        return Outcome.CONTINUE
