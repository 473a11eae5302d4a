import os

from .config import SCAN_LOCATIONS

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "safepass"),
}

FUNCTIONS_URL = os.getenv("FUNCTIONS_URL", "http://localhost:54321/functions/v1")
FUNCTIONS_KEY = os.getenv("FUNCTIONS_KEY", "")
FUNCTIONS_TIMEOUT = float(os.getenv("FUNCTIONS_TIMEOUT", "10"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed default settings and demo accounts on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

# Canned admin/teacher/driver/monitor/nurse logins with password "password"
DEMO_LOGIN_ENABLED = bool(int(os.getenv("DEMO_LOGIN_ENABLED", "1")))

REFRESH_INTERVAL_SECONDS = int(os.getenv("REFRESH_INTERVAL_SECONDS", "30"))
SCAN_LOCATIONS = SCAN_LOCATIONS
