import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "turnstile_test_db"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

MAX_UPLOAD_MB = 1

SINGLE_DEVICE_POLICY = "single_device"
CONSOLIDATED_POLICY = "consolidated"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
