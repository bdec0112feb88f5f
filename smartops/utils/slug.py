import re
import unicodedata

SUBDOMAIN_PATTERN = re.compile(r"^[a-z0-9-]+$")
SUBDOMAIN_MAX_LENGTH = 63


def normalize_subdomain(value: str) -> str:
    """Trim and lowercase; anything else is left for ``is_valid_subdomain`` to reject."""
    if not value:
        return ""
    value = unicodedata.normalize("NFKC", value)
    return value.strip().lower()


def is_valid_subdomain(value: str) -> bool:
    return bool(value) and len(value) <= SUBDOMAIN_MAX_LENGTH and bool(SUBDOMAIN_PATTERN.match(value))


def suggest_subdomain(value: str) -> str:
    """Derive a subdomain candidate from a business name: "Açaí & Co" -> "acai-co"."""
    if not value:
        return ""
    value = unicodedata.normalize("NFKD", value)
    value = value.encode("ascii", "ignore").decode("ascii").lower()
    value = re.sub(r"[^a-z0-9]+", "-", value).strip("-")
    return re.sub(r"-{2,}", "-", value)[:SUBDOMAIN_MAX_LENGTH]
