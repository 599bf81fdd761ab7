"""Core constants: cache key prefixes and shared literal values."""

# Cache key prefixes (used with :id)
CACHE_PREFIX_DESCENDANTS = "descendants"
CACHE_PREFIX_PERMISSION = "permission"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# Hop limit for upward parent walks and tree builds; guards against corrupt data
MAX_CATEGORY_DEPTH = 20

# Free-text terms shorter than this are ignored by search (rejected by admin search)
MIN_SEARCH_TERM_LENGTH = 2

# Periodicity tags accepted on documents and in search filters
PERIODICITIES = ("monthly", "quarterly", "semiannual", "annual")

# Storage subdirectory prefix for a category's files: category-{id}
CATEGORY_STORAGE_PREFIX = "category"

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
DEFAULT_RECENT_LIMIT = 10
MAX_RECENT_LIMIT = 50

MIN_PASSWORD_LENGTH = 8
DEFAULT_USER_PAGE_SIZE = 50
MAX_USER_PAGE_SIZE = 200
