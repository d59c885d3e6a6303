"""Core constants: cache key prefixes and shared literal values.

Single source of truth for cache key structure (DRY).
"""

# Cache key prefixes (used with :id or :token)
CACHE_PREFIX_USER = "user"
CACHE_PREFIX_TOKEN = "token"

# Aggregate listing key; dropped on every user mutation.
CACHE_KEY_USERS_ALL = "users:all"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# Listing defaults (page is 1-based)
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
