"""
config.py - Settings for one peer process

SessionConfig collects what the command line (or the environment) says about
the role to play, where to connect and how verbose to be.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from connect4net.debug import ENV_DEBUG_LEVEL
from connect4net.utils import DEFAULT_PORT

# Environment fallbacks for command line options
ENV_ADDRESS = "CONNECT4NET_ADDRESS"
ENV_PORT = "CONNECT4NET_PORT"

DEFAULT_ADDRESS = "localhost"
PLAYER_TYPES = ("human", "computer")


@dataclass(frozen=True)
class SessionConfig:
    role: str                 # "host" or "join"
    address: str = DEFAULT_ADDRESS
    port: int = DEFAULT_PORT
    player: str = "human"
    reply_timeout: Optional[float] = None
    debug_level: str = "warning"
    log_file: Optional[str] = None

    def __post_init__(self) -> None:
        if self.role not in ("host", "join"):
            raise ValueError(f"Unknown role: {self.role}")
        if self.player not in PLAYER_TYPES:
            raise ValueError(f"Unknown player type: {self.player}")
        if not 0 <= self.port <= 65535:
            raise ValueError(f"Port out of range: {self.port}")
        if self.reply_timeout is not None and self.reply_timeout <= 0:
            raise ValueError("Reply timeout must be positive")

    @classmethod
    def from_args(cls, args) -> "SessionConfig":
        """Build a config from parsed CLI arguments, falling back to the environment."""
        # A host binds every interface unless told otherwise
        default_address = "" if args.command == "host" else DEFAULT_ADDRESS
        address = args.address or os.environ.get(ENV_ADDRESS) or default_address
        port = args.port if args.port is not None else int(os.environ.get(ENV_PORT, DEFAULT_PORT))
        if args.debug:
            level = "debug"
        else:
            level = args.debug_level or os.environ.get(ENV_DEBUG_LEVEL) or "warning"
        return cls(
            role=args.command,
            address=address,
            port=port,
            player=args.player,
            reply_timeout=args.reply_timeout,
            debug_level=level,
            log_file=args.log_file,
        )
