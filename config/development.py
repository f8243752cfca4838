import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timetrack_db"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Tenant-local wall clock used for day boundaries and hour classification
TIMEZONE = os.getenv("TIMEZONE", "UTC")

SEQUENCE_MAX_RETRIES = int(os.getenv("SEQUENCE_MAX_RETRIES", "3"))
LOCK_TIMEOUT_SECONDS = int(os.getenv("LOCK_TIMEOUT_SECONDS", "10"))

# Check overlaps against every day a new entry touches, not only its start date
OVERLAP_SPAN_ALL_DAYS = bool(int(os.getenv("OVERLAP_SPAN_ALL_DAYS", "0")))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
