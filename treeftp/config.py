import logging
import os
from dataclasses import dataclass, field

DEFAULT_PORT = 21
DEFAULT_TIMEOUT = 10.0
MAX_NUM_RETRIES = 3
RETRY_INTERVAL = 5.0
DEFAULT_OUTPUT_FILE = "directory_structure.json"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass
class RetryPolicy:
    """Fixed reconnection policy: no jitter, no exponential growth."""
    max_retries: int = MAX_NUM_RETRIES
    retry_interval: float = RETRY_INTERVAL

    def __post_init__(self):
        if self.max_retries < 1:
            raise ValueError(f"max_retries must be at least 1, got {self.max_retries}")
        if self.retry_interval < 0:
            raise ValueError(f"retry_interval must not be negative, got {self.retry_interval}")


@dataclass
class ClientSettings:
    """
    Client configuration.

    Values come from the TREEFTP_* environment variables when built with
    `from_env()`; command line flags override them.
    """
    port: int = DEFAULT_PORT
    timeout: float = DEFAULT_TIMEOUT
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    output_file: str = DEFAULT_OUTPUT_FILE
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ=None) -> "ClientSettings":
        env = os.environ if environ is None else environ
        return cls(
            port=_read_number(env, "TREEFTP_PORT", int, DEFAULT_PORT),
            timeout=_read_number(env, "TREEFTP_TIMEOUT", float, DEFAULT_TIMEOUT),
            retry=RetryPolicy(
                max_retries=_read_number(env, "TREEFTP_MAX_RETRIES", int, MAX_NUM_RETRIES, minimum=1),
                retry_interval=_read_number(env, "TREEFTP_RETRY_INTERVAL", float, RETRY_INTERVAL),
            ),
            output_file=env.get("TREEFTP_OUTPUT") or DEFAULT_OUTPUT_FILE,
            log_level=_read_log_level(env, "TREEFTP_LOG_LEVEL", DEFAULT_LOG_LEVEL),
        )


def _read_number(env, name: str, kind, default, minimum=0):
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = kind(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value < minimum:
        raise ValueError(f"{name} must be at least {minimum}, got {raw!r}")
    return value


def _read_log_level(env, name: str, default: str) -> str:
    level = (env.get(name) or "").strip().upper() or default
    # getLevelName maps registered names to their number, anything else to a string
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"{name} must be a logging level name, got {level!r}")
    return level
