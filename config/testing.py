import os

from .config import SCAN_LOCATIONS

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "safepass_test"),
}

FUNCTIONS_URL = "http://functions.test"
FUNCTIONS_KEY = "test-key"
FUNCTIONS_TIMEOUT = 2.0

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
DEMO_LOGIN_ENABLED = False

# 0 disables the background refresher
REFRESH_INTERVAL_SECONDS = 0
SCAN_LOCATIONS = SCAN_LOCATIONS
