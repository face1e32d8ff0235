"""
Merch Booth Lines
=================
Line report aggregation and the per-venue polling board.
"""

from concert_buddy.booths.aggregator import (
    BoothStatus, LineReport, MerchBooth, compute_booth_status, compute_trend, sort_statuses,
)
from concert_buddy.booths.board import BoardRegistry, BoothStatusBoard

__all__ = [
    "BoothStatus", "LineReport", "MerchBooth", "compute_booth_status", "compute_trend",
    "sort_statuses", "BoardRegistry", "BoothStatusBoard",
]
