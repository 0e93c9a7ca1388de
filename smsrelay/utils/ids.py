# smsrelay/utils/ids.py

from enum import Enum
from uuid import uuid4

class IDPrefix(str, Enum):
    REQUEST = "req"
    BATCH = "batch"

def generate_prefixed_id(prefix: IDPrefix) -> str:
    """
    Generate a short random id with a prefix.

    Args:
        prefix (IDPrefix): The entity prefix (e.g., REQUEST, BATCH).

    Returns:
        str: A prefixed id like 'req-1a2b3c4d', short enough for log lines
    """
    return f"{prefix.value}-{uuid4().hex[:8]}"
