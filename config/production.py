import os

from .config import SCAN_LOCATIONS

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "safepass"),
}

FUNCTIONS_URL = os.getenv("FUNCTIONS_URL", "")
FUNCTIONS_KEY = os.getenv("FUNCTIONS_KEY", "")
FUNCTIONS_TIMEOUT = float(os.getenv("FUNCTIONS_TIMEOUT", "10"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
DEMO_LOGIN_ENABLED = bool(int(os.getenv("DEMO_LOGIN_ENABLED", "0")))

REFRESH_INTERVAL_SECONDS = int(os.getenv("REFRESH_INTERVAL_SECONDS", "30"))
SCAN_LOCATIONS = SCAN_LOCATIONS
