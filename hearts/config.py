"""Runtime settings for the Hearts room server, read from the environment."""

from __future__ import annotations

from dataclasses import dataclass
import os


@dataclass(frozen=True)
class Settings:
    bot_delay: float = 0.8  # seconds between bot actions
    trick_delay: float = 2.0  # pause after a trick fills so players can see it
    bot_strategy: str = "greedy"
    max_name_length: int = 20
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            bot_delay=float(os.getenv("HEARTS_BOT_DELAY", cls.bot_delay)),
            trick_delay=float(os.getenv("HEARTS_TRICK_DELAY", cls.trick_delay)),
            bot_strategy=os.getenv("HEARTS_BOT_STRATEGY", cls.bot_strategy).lower(),
            max_name_length=int(os.getenv("HEARTS_MAX_NAME_LENGTH", cls.max_name_length)),
            log_level=os.getenv("HEARTS_LOG_LEVEL", cls.log_level).upper(),
            host=os.getenv("HEARTS_HOST", cls.host),
            port=int(os.getenv("HEARTS_PORT", cls.port)),
        )
