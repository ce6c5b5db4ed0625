"""Server-authoritative pong arena: tick simulation, match server and client."""

__version__ = "0.1.0"
