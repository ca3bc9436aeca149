import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "geo_attendance_test"),
    "connection_timeout": 5,
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
AUTO_SEED_DB = False

OPENAI_API_KEY = None
SUMMARY_MODEL = "gpt-4o-mini"
SUMMARY_TIMEOUT_SECONDS = 5.0
SUMMARY_MAX_RETRIES = 0

REQUIRE_WORKPLACE_CONFIG = False
LOCATION_MAX_AGE_MS = 120_000
REQUIRE_EMAIL_CONFIRMATION = False
