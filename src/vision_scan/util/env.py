"""Load configuration from the environment and an optional .env file.

This is the single source of truth for configuration.
Unlike a batch audit, a scan's domain usually comes from the caller,
so DOMAIN is optional here.
"""

import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv
from .types import ScanConfig, DEFAULT_USER_AGENT


def load_config(env_file: Optional[Path] = None) -> ScanConfig:
    """Load configuration from .env (if present) and the process environment.

    Returns a ScanConfig with all settings ready to use.
    Crashes early on non-numeric timeouts rather than scanning with garbage.
    """
    if env_file is None:
        env_file = get_repo_root() / ".env"

    if Path(env_file).exists():
        load_dotenv(env_file)

    config = ScanConfig(
        domain=os.getenv("DOMAIN") or None,

        # Per-probe timeouts (seconds)
        port_timeout=_float_env("PORT_TIMEOUT", 2.5),
        tls_timeout=_float_env("TLS_TIMEOUT", 4.0),
        dns_timeout=_float_env("DNS_TIMEOUT", 4.0),
        http_timeout=_float_env("HTTP_TIMEOUT", 10.0),

        user_agent=os.getenv("USER_AGENT") or DEFAULT_USER_AGENT,
    )

    return config


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number of seconds, got {raw!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


def get_repo_root() -> Path:
    """Return the repository root directory."""
    return Path(__file__).parent.parent.parent.parent
