import os

from . import env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "geo_attendance"),
    "connection_timeout": int(os.getenv("DB_TIMEOUT_SECONDS", "10")),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "1")
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
SUMMARY_MODEL = os.getenv("SUMMARY_MODEL", "gpt-4o-mini")
SUMMARY_TIMEOUT_SECONDS = float(os.getenv("SUMMARY_TIMEOUT_SECONDS", "20"))
SUMMARY_MAX_RETRIES = int(os.getenv("SUMMARY_MAX_RETRIES", "1"))

# False: check-in is allowed (with a warning) while no workplace is loaded.
REQUIRE_WORKPLACE_CONFIG = env_flag("REQUIRE_WORKPLACE_CONFIG", "0")
LOCATION_MAX_AGE_MS = int(os.getenv("LOCATION_MAX_AGE_MS", "120000"))
REQUIRE_EMAIL_CONFIRMATION = env_flag("REQUIRE_EMAIL_CONFIRMATION", "0")
