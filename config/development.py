import os

# PostgreSQL is used when DATABASE_URL is set, SQLite on SQLITE_PATH otherwise.
DATABASE_URL = os.getenv("DATABASE_URL", "")
DATABASE_SSLMODE = os.getenv("DATABASE_SSLMODE", "")
SQLITE_PATH = os.getenv("SQLITE_PATH", "data.db")
DATABASE_POOL_MIN = int(os.getenv("DATABASE_POOL_MIN", "1"))
DATABASE_POOL_MAX = int(os.getenv("DATABASE_POOL_MAX", "5"))

# Only applied on first boot, when no admin account exists yet.
DEFAULT_ADMIN_EMAIL = os.getenv("DEFAULT_ADMIN_EMAIL", "admin@example.com")
DEFAULT_ADMIN_PASSWORD = os.getenv("DEFAULT_ADMIN_PASSWORD", "change-me")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
