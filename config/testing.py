import os

DATABASE_URL = ""
DATABASE_SSLMODE = ""
SQLITE_PATH = os.getenv("SQLITE_PATH", ":memory:")
DATABASE_POOL_MIN = 1
DATABASE_POOL_MAX = 2

DEFAULT_ADMIN_EMAIL = "admin@example.com"
DEFAULT_ADMIN_PASSWORD = "test-password"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
