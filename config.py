"""
Application Settings

Values are read from the environment (a local .env file is loaded first).
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _get_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


PORT = int(os.getenv("PORT", 8000))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "sid")
SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_SECONDS", 24 * 60 * 60))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", 12))

DEFAULT_USER_POINTS = int(os.getenv("DEFAULT_USER_POINTS", 500))
MAX_ITEM_QUANTITY = 10
MAX_PASSWORD_BYTES = 72

SEED_SAMPLE_DATA = _get_bool("SEED_SAMPLE_DATA", True)
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin@campus.edu")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")
