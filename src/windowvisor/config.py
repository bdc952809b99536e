"""Configuration loader for the quote engine."""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

ENV_PREFIX = 'WINDOWVISOR_'


@dataclass
class Settings:
    pricing_url: Optional[str] = None
    pricing_timeout: float = 10.0
    auth_token: Optional[str] = None
    currency_code: str = 'USD'
    extraction_confidence: float = 0.8
    log_level: str = 'INFO'


def _float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Invalid value for {ENV_PREFIX}{name}: {raw!r}, using {default}")
        return default


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Load settings from environment variables.

    Args:
        env: Mapping to read instead of os.environ

    Returns:
        Settings object
    """
    env = os.environ if env is None else env

    return Settings(
        pricing_url=env.get(ENV_PREFIX + 'PRICING_URL') or None,
        pricing_timeout=_float(env, 'PRICING_TIMEOUT', 10.0),
        auth_token=env.get(ENV_PREFIX + 'AUTH_TOKEN') or None,
        currency_code=(env.get(ENV_PREFIX + 'CURRENCY') or 'USD').upper(),
        extraction_confidence=_float(env, 'EXTRACTION_CONFIDENCE', 0.8),
        log_level=(env.get(ENV_PREFIX + 'LOG_LEVEL') or 'INFO').upper(),
    )
