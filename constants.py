from config import settings


# Rate limiting, one bucket per client address shared by every endpoint.
# Resolved per request so the limit follows the current settings.
def limit_value_api() -> str:
    return settings.rate_limit


SCOPE_API = "api"

# Notes
TITLE_MAX_LENGTH = 100
CONTENT_MAX_LENGTH = 10000
TAG_MAX_LENGTH = 20
TAGS_MAX_COUNT = 10
DEFAULT_COLOR = "#ffffff"
COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"

# Users
NAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 6

# Note listing
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
# larger paging values fall back to the defaults, offsets must fit a 64 bit integer
MAX_PAGING_VALUE = 2**31 - 1
SORT_FIELDS = ("createdAt", "updatedAt", "title")
DEFAULT_SORT_BY = "createdAt"
DEFAULT_SORT_ORDER = "desc"
