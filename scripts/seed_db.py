from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.safepass.safepass.database.bootstrap import ensure_default_settings, ensure_demo_users
from src.safepass.safepass.database.connection import DBConfig, DatabaseConnection


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed default settings and the approved demo accounts.")
    parser.add_argument("--no-demo-users", action="store_true", help="only insert missing system_settings rows")
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(settings.DB_CONFIG))

    ensure_default_settings(conn)
    if not args.no_demo_users:
        ensure_demo_users(conn)

    cfg = conn.config
    print(f"OK: Seeded database -> {cfg.user}@{cfg.host}:{cfg.port}/{cfg.database}")


if __name__ == "__main__":
    main()
