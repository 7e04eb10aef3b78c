"""
Core utility functions used across pipeline stages
"""
import math
import re
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from core.exceptions import ValidationError

# "https://", "ftp://", "mailto:" but not "host:8080"
SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.-]*:(?!\d)", re.IGNORECASE)


def normalize_url(url: str) -> str:
    """Add an https scheme when none is given; only http(s) URLs are accepted"""
    if not url or not url.strip():
        raise ValidationError("URL must not be empty", field="url")

    url = url.strip()
    if not SCHEME_RE.match(url):
        url = f"https://{url}"

    if not validate_url(url):
        raise ValidationError(f"Invalid URL: {url}", field="url")
    return url


def validate_url(url: str) -> bool:
    """
    Validate URL format.

    Args:
        url: URL to validate

    Returns:
        True if valid URL format
    """
    try:
        result = urlparse(url)
        return all([result.scheme in ("http", "https"), result.netloc])
    except ValueError:
        return False


def extract_host(url: str) -> Optional[str]:
    """Lowercase hostname of a URL without port, or None"""
    try:
        host = urlparse(url).hostname
    except ValueError:
        return None
    return host.lower() if host else None


def origin_of(url: str) -> str:
    """scheme://netloc of a URL"""
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


def is_number(value: Any) -> bool:
    """True for real int/float values that are not NaN or infinite (bools excluded)"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def clamp(value: Optional[float], low: float = 0, high: float = 100) -> Optional[float]:
    """Clamp a value into [low, high]; None passes through"""
    if value is None:
        return None
    return max(low, min(high, value))


def to_number(value: Any) -> Any:
    """
    Coerce a value to int/float.

    Numbers are returned unchanged, numeric strings are parsed. Raises
    ValueError/TypeError when the value cannot be represented as a number.
    """
    if isinstance(value, bool):
        raise TypeError(f"boolean {value!r} is not numeric")
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        parsed = float(value.strip())
        return int(parsed) if parsed.is_integer() else parsed
    raise TypeError(f"{type(value).__name__} is not numeric")


def get_nested(data: Dict[str, Any], path: str, default: Any = None) -> Any:
    """
    Get nested value from dictionary using dot notation.

    Args:
        data: Dictionary to search
        path: Dot-separated path (e.g., "a.b.c")
        default: Default value if path not found

    Returns:
        Value at path or default
    """
    try:
        current = data
        for key in path.split("."):
            current = current[key]
        return current
    except (KeyError, TypeError):
        return default


def set_nested(data: Dict[str, Any], path: str, value: Any) -> None:
    """Set a value using dot notation, creating intermediate dictionaries"""
    keys = path.split(".")
    current = data
    for key in keys[:-1]:
        if not isinstance(current.get(key), dict):
            current[key] = {}
        current = current[key]
    current[keys[-1]] = value


def round_half_up(value: float) -> int:
    """Round .5 away from zero instead of to the nearest even integer"""
    return int(math.floor(abs(value) + 0.5) * (1 if value >= 0 else -1))
