"""
Helper Functions
================
Small shared utilities: rounding, id generation, timestamps.
"""

import math
import secrets
import string
import time
from datetime import datetime

ROOM_CODE_ALPHABET = string.ascii_uppercase + string.digits
ROOM_CODE_LENGTH = 6


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (2.5 -> 3), unlike round()."""
    return int(math.floor(value + 0.5))


def utcnow() -> datetime:
    """Naive UTC timestamp, matching what the tables store."""
    return datetime.utcnow()


def generate_room_code() -> str:
    """6-character shareable room code, e.g. 'K3ZQ9A'."""
    return "".join(secrets.choice(ROOM_CODE_ALPHABET) for _ in range(ROOM_CODE_LENGTH))


def generate_report_id() -> str:
    """Time-prefixed id like report_1718000000000_k2j4h5g6f."""
    suffix = "".join(secrets.choice(string.ascii_lowercase + string.digits) for _ in range(9))
    return f"report_{int(time.time() * 1000)}_{suffix}"
