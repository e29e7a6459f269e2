"""Human-readable document numbers."""
import secrets
import string
from datetime import datetime
from typing import Optional

_ALPHABET = string.ascii_uppercase + string.digits


def generate_number(prefix: str, now: Optional[datetime] = None) -> str:
    """Return ``PREFIX-YYYYMMDD-XXX`` with a random 3-character suffix."""
    now = now or datetime.utcnow()
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(3))
    return f"{prefix}-{now.strftime('%Y%m%d')}-{suffix}"


def generate_quote_number(now: Optional[datetime] = None) -> str:
    return generate_number("QT", now)


def generate_order_number(now: Optional[datetime] = None) -> str:
    return generate_number("ORD", now)
