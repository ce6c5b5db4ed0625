"""
constants.py: Default game and network settings.
"""

# -------- Network & Server Config --------
GAME_PORT = 9393
BIND_ADDR = "0.0.0.0"
SERVER_ADDR = "localhost"
BUFFER_SIZE = 1024              # Longest line accepted from a peer
LOG_FILE = "server.log"

# Time synchronization
TICK_RATE = 60                  # Authoritative server ticks per second
TICK_TIME = 1.0 / TICK_RATE     # Fixed time step
MATCH_DURATION = 60             # seconds
SECRET_REQUEST_TIME = 15        # seconds left when the secret request goes out

# -------- Arena Config --------
ARENA_WIDTH = 36
ARENA_HEIGHT = 18
PADDLE_WIDTH = 2                # Top/bottom paddle
PADDLE_HEIGHT = 1               # Left/right paddle

# -------- Velocity Config (cells / tick unless noted) --------
PADDLE_VELOCITY_X = 0.5
PADDLE_VELOCITY_Y = 1.0
BALL_SPEED = 1.5                # Paddle lengths per second
BALL_SPAWN_JITTER = 3           # Max cells the ball spawns off center

# -------- Mode Multipliers --------
FAST_BALL_MULTIPLIER = 2.0
FAST_PADDLE_MULTIPLIER = 1.5
DOUBLE_BALL_MULTIPLIER = 0.75
