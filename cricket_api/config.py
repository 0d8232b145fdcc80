# cricket_api/config.py
from __future__ import annotations

import os
from dotenv import load_dotenv

# Load .env from project root
load_dotenv()


def _get_env(name: str, default: str = "") -> str:
    return os.getenv(name, default).strip()


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, str(default))
    try:
        return int(raw)
    except ValueError:
        return default


# -------------------------
# Match format
# -------------------------
DEFAULT_OVERS_PER_INNINGS: int = _get_env_int("DEFAULT_OVERS_PER_INNINGS", 20)
MAX_OVERS: int = _get_env_int("MAX_OVERS", 50)

# Squad size limits (one batsman must always be left unpartnered)
MIN_PLAYERS: int = _get_env_int("MIN_PLAYERS", 2)
MAX_PLAYERS: int = _get_env_int("MAX_PLAYERS", 11)

# Penalty runs for illegal deliveries
WIDE_RUNS: int = _get_env_int("WIDE_RUNS", 1)
NO_BALL_RUNS: int = _get_env_int("NO_BALL_RUNS", 1)


# -------------------------
# Live match store
# -------------------------
# Idle matches are dropped after this many seconds
MATCH_TTL_SECONDS: int = _get_env_int("MATCH_TTL_SECONDS", 6 * 3600)


# -------------------------
# Boundary celebration tone
# -------------------------
CELEBRATION_ENABLED: bool = _get_env("CELEBRATION_ENABLED", "1") == "1"
CELEBRATION_SAMPLE_RATE: int = _get_env_int("CELEBRATION_SAMPLE_RATE", 22050)

LOG_LEVEL: str = _get_env("LOG_LEVEL", "INFO").upper()


def validate_config() -> None:
    if DEFAULT_OVERS_PER_INNINGS <= 0:
        raise RuntimeError("DEFAULT_OVERS_PER_INNINGS must be positive")

    if MAX_OVERS < DEFAULT_OVERS_PER_INNINGS:
        raise RuntimeError("MAX_OVERS must be >= DEFAULT_OVERS_PER_INNINGS")

    # A side needs two batsmen at the crease to start an innings
    if MIN_PLAYERS < 2:
        raise RuntimeError("MIN_PLAYERS must be at least 2")

    if MAX_PLAYERS < MIN_PLAYERS:
        raise RuntimeError("MAX_PLAYERS must be >= MIN_PLAYERS")

    if WIDE_RUNS < 0 or NO_BALL_RUNS < 0:
        raise RuntimeError("WIDE_RUNS and NO_BALL_RUNS must not be negative")

    if MATCH_TTL_SECONDS <= 0:
        raise RuntimeError("MATCH_TTL_SECONDS must be positive")

    if CELEBRATION_SAMPLE_RATE < 8000:
        raise RuntimeError("CELEBRATION_SAMPLE_RATE must be at least 8000 Hz")

    if LOG_LEVEL not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise RuntimeError(f"Unknown LOG_LEVEL: {LOG_LEVEL}")
