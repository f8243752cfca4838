import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timetrack_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

TIMEZONE = "UTC"

SEQUENCE_MAX_RETRIES = 3
LOCK_TIMEOUT_SECONDS = 2
OVERLAP_SPAN_ALL_DAYS = False

AUTO_INIT_DB = False
