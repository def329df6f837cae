"""ID Generation Utilities"""
import uuid
from datetime import datetime, timezone
from typing import Collection


def generate_correlation_id() -> str:
    """
    Generate a correlation ID for request tracing

    Returns:
        Correlation ID string with timestamp prefix
    """
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    unique_part = uuid.uuid4().hex[:8]
    return f"COR-{timestamp}-{unique_part}"


def next_free_suffixed_id(base: str, taken: Collection[str]) -> str:
    """
    Deterministic rename for a duplicated ID

    Returns `<base>_<n>` with the smallest n >= 2 not in `taken`.

    Examples:
        >>> next_free_suffixed_id('n1', {'n1'})
        'n1_2'
        >>> next_free_suffixed_id('n1', {'n1', 'n1_2'})
        'n1_3'
    """
    n = 2
    while f"{base}_{n}" in taken:
        n += 1
    return f"{base}_{n}"
