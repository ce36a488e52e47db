"""
Environment-driven settings for the retreat cost splitter.

Variables:
    CALCULATION_TTL_DAYS: Days a saved calculation stays loadable (default 30).
    DEFAULT_EXCHANGE_RATE: EUR to USD rate used when none is given (default 1.07).
    LOG_LEVEL: Root log level name (default INFO).
    FIREBASE_SERVICE_ACCOUNT: Service account JSON, used in deployments.
    FIREBASE_KEY_PATH: Service account key file used otherwise
        (default config/serviceAccountKey.json).
"""

import os


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got: {raw}")


CALCULATION_TTL_DAYS = int(_env_float("CALCULATION_TTL_DAYS", 30))
DEFAULT_EXCHANGE_RATE = _env_float("DEFAULT_EXCHANGE_RATE", 1.07)
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
FIREBASE_SERVICE_ACCOUNT = os.environ.get("FIREBASE_SERVICE_ACCOUNT", "")
FIREBASE_KEY_PATH = os.environ.get("FIREBASE_KEY_PATH", "config/serviceAccountKey.json")
