"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

SESSION_COOKIE_NAME = "admin_token"
SESSION_TTL_HOURS = 24

PBKDF2_ITERATIONS = 10000
PBKDF2_KEY_LENGTH = 64
SALT_BYTES = 16
TOKEN_BYTES = 32

DEFAULT_SQLITE_PATH = "data.db"
DEFAULT_ADMIN_EMAIL = "admin@example.com"
DEFAULT_ADMIN_PASSWORD = "change-me"

# Ids and step counts live in 32-bit INTEGER columns on both engines.
MAX_DB_INT = 2147483647

DEFAULT_PG_MIN_CONN = 1
DEFAULT_PG_MAX_CONN = 5
