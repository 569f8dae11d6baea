import math
import secrets
from datetime import datetime
from typing import Any, Optional

# Constants to replace magic numbers
SHORT_ID_LENGTH = 6
DEFAULT_TTL_SECONDS = 31536000  # one year
# Letters and digits without the look-alikes 0/O, 1/I/l
SAFE_ALPHABET = 'ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz23456789'


def generate_short_id(length: int = SHORT_ID_LENGTH) -> str:
    """
    Generate a random short identifier.

    Every character is drawn independently and uniformly from SAFE_ALPHABET.

    Args:
        length (int): Number of characters (default: 6)

    Returns:
        str: The short identifier
    """
    return ''.join(secrets.choice(SAFE_ALPHABET) for _ in range(length))


def build_primary_key(domain: str, short_id: str) -> str:
    return f"{domain}#{short_id}"


def build_short_url(domain: str, short_id: str) -> str:
    return f"https://{domain}/{short_id}"


def resolve_ttl(raw_value: Optional[Any]) -> float:
    """
    Resolve the configured TTL in seconds.

    Args:
        raw_value: Configured value, usually the raw environment string

    Returns:
        float: The configured TTL when it is a finite positive number,
        DEFAULT_TTL_SECONDS otherwise
    """
    if raw_value is None or isinstance(raw_value, bool):
        return DEFAULT_TTL_SECONDS

    try:
        ttl = float(raw_value)
    except (TypeError, ValueError):
        return DEFAULT_TTL_SECONDS

    if not math.isfinite(ttl) or ttl <= 0:
        return DEFAULT_TTL_SECONDS
    return ttl


def calculate_expiry_ttl(created: datetime, ttl_seconds: float) -> int:
    """
    Compute the absolute expiry, in epoch seconds, used by DynamoDB TTL.

    Args:
        created (datetime): Timezone-aware creation time
        ttl_seconds (float): Lifetime in seconds

    Returns:
        int: Epoch seconds at which the record may expire
    """
    return int(created.timestamp() + ttl_seconds)
