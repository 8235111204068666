import os

DATABASE_URL = os.getenv("DATABASE_URL", "")
# Hosted Postgres usually needs TLS without certificate verification.
DATABASE_SSLMODE = os.getenv("DATABASE_SSLMODE", "require" if DATABASE_URL else "")
SQLITE_PATH = os.getenv("SQLITE_PATH", "data.db")
DATABASE_POOL_MIN = int(os.getenv("DATABASE_POOL_MIN", "1"))
DATABASE_POOL_MAX = int(os.getenv("DATABASE_POOL_MAX", "5"))

DEFAULT_ADMIN_EMAIL = os.getenv("DEFAULT_ADMIN_EMAIL", "admin@example.com")
DEFAULT_ADMIN_PASSWORD = os.getenv("DEFAULT_ADMIN_PASSWORD", "change-me")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
