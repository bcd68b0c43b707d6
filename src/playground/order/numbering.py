"""Human-readable order numbers: ``PG`` + YY + MM + four random digits."""

import random
from datetime import datetime

_MAX_ATTEMPTS = 20


def format_order_number(moment: datetime, suffix: int) -> str:
    return f"PG{moment:%y%m}{suffix:04d}"


def generate_order_number(moment: datetime, rng=random) -> str:
    return format_order_number(moment, rng.randint(0, 9999))


def allocate_order_number(moment: datetime, is_taken, rng=random) -> str:
    """Draw order numbers until ``is_taken`` reports a free one."""
    for _ in range(_MAX_ATTEMPTS):
        candidate = generate_order_number(moment, rng)
        if not is_taken(candidate):
            return candidate
    raise RuntimeError(f"Could not allocate a unique order number for {moment:%Y-%m} after {_MAX_ATTEMPTS} attempts")
