from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for _path in (REPO_ROOT, REPO_ROOT / "src"):
    if str(_path) not in sys.path:
        sys.path.insert(0, str(_path))

from dotenv import load_dotenv

from config import get_settings_module

from step_challenge.core.constants import (
    DEFAULT_ADMIN_EMAIL,
    DEFAULT_ADMIN_PASSWORD,
    DEFAULT_PG_MAX_CONN,
    DEFAULT_PG_MIN_CONN,
    DEFAULT_SQLITE_PATH,
)
from step_challenge.database.bootstrap import apply_schema, ensure_default_admin, list_tables
from step_challenge.database.connection import open_database


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())

    db = open_database(
        getattr(settings, "DATABASE_URL", "") or None,
        sqlite_path=getattr(settings, "SQLITE_PATH", "") or DEFAULT_SQLITE_PATH,
        sslmode=getattr(settings, "DATABASE_SSLMODE", "") or None,
        min_conn=getattr(settings, "DATABASE_POOL_MIN", 0) or DEFAULT_PG_MIN_CONN,
        max_conn=getattr(settings, "DATABASE_POOL_MAX", 0) or DEFAULT_PG_MAX_CONN,
    )
    try:
        apply_schema(db)
        seeded = ensure_default_admin(
            db,
            email=getattr(settings, "DEFAULT_ADMIN_EMAIL", "") or DEFAULT_ADMIN_EMAIL,
            password=getattr(settings, "DEFAULT_ADMIN_PASSWORD", "") or DEFAULT_ADMIN_PASSWORD,
        )
        tables = list_tables(db)
    finally:
        db.close()

    print(f"OK: schema applied ({db.dialect.value}, tables={len(tables)}, default admin seeded={seeded})")


if __name__ == "__main__":
    main()
