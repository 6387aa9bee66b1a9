import re
import unicodedata

SLUG_PATTERN = re.compile(r"^[a-z0-9-]{3,50}$")

# First path segments already taken by global API routes and top-level pages.
RESERVED_SLUGS = frozenset(
    {
        "admin",
        "api",
        "assets",
        "auth",
        "docs",
        "health",
        "login",
        "logout",
        "menu",
        "openapi-json",
        "orders",
        "orgs",
        "redoc",
        "register",
        "select-org",
        "signup",
        "static",
        "uploads",
    }
)


def normalize_slug(value: str) -> str:
    if not value:
        return ""

    value = unicodedata.normalize("NFKD", value)
    value = value.encode("ascii", "ignore").decode("ascii")
    value = re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")
    value = re.sub(r"-{2,}", "-", value)

    return value


def is_valid_slug(value: str) -> bool:
    return bool(SLUG_PATTERN.match(value or ""))


def is_reserved_slug(value: str) -> bool:
    return value in RESERVED_SLUGS
