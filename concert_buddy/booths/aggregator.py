"""
Booth Status Aggregation
========================
Turn the newest line reports for a merch booth into a displayed status:
average line length, average wait, newest report time and a short-term trend.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

from concert_buddy.helpers import round_half_up, utcnow

REPORT_WINDOW = 20      # newest reports fetched per booth
TREND_WINDOW = 3        # reports per trend window (recent vs previous)
TREND_THRESHOLD = 0.3

TREND_UP = "up"
TREND_DOWN = "down"
TREND_STABLE = "stable"

LINE_LENGTH_LABELS = {
    0: "No Line",
    1: "Short",
    2: "Medium",
    3: "Long",
}

LINE_LENGTH_COLORS = {
    0: "#22c55e",  # green
    1: "#eab308",  # yellow
    2: "#f97316",  # orange
    3: "#ef4444",  # red
}

LINE_LENGTH_HINTS = {
    0: "No Line",
    1: "Short (1-5 people)",
    2: "Medium (6-15 people)",
    3: "Long (15+ people)",
}

WAIT_TIME_CHOICES = [0, 5, 10, 15, 20, 30]


@dataclass(frozen=True)
class MerchBooth:
    id: str
    venue_id: str
    name: str
    location_x: float = 0.0
    location_y: float = 0.0
    description: str = ""

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "MerchBooth":
        return cls(
            id=record["id"],
            venue_id=record["venue_id"],
            name=record["name"],
            location_x=record.get("location_x") or 0.0,
            location_y=record.get("location_y") or 0.0,
            description=record.get("description") or "",
        )


@dataclass(frozen=True)
class LineReport:
    id: str
    booth_id: str
    user_id: str
    line_length: int
    reported_at: datetime
    wait_time_minutes: Optional[int] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "LineReport":
        return cls(
            id=record["id"],
            booth_id=record["booth_id"],
            user_id=record["user_id"],
            line_length=record["line_length"],
            reported_at=record["reported_at"],
            wait_time_minutes=record.get("wait_time_minutes"),
        )


@dataclass(frozen=True)
class BoothStatus:
    booth: MerchBooth
    avg_line_length: int
    avg_wait_time: int
    last_reported_at: str
    report_count: int
    trend: str

    @property
    def label(self) -> str:
        return LINE_LENGTH_LABELS.get(self.avg_line_length, "")

    @property
    def color(self) -> Optional[str]:
        return LINE_LENGTH_COLORS.get(self.avg_line_length)

    def to_dict(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        booth = self.booth
        return {
            "booth": {
                "id": booth.id,
                "venue_id": booth.venue_id,
                "name": booth.name,
                "location_x": booth.location_x,
                "location_y": booth.location_y,
                "description": booth.description,
            },
            "avg_line_length": self.avg_line_length,
            "avg_wait_time": self.avg_wait_time,
            "last_reported_at": self.last_reported_at,
            "report_count": self.report_count,
            "trend": self.trend,
            "label": self.label,
            "color": self.color,
            "time_ago": time_ago(self.last_reported_at, now),
        }


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def compute_trend(reports: Sequence[LineReport]) -> str:
    """Compare the 3 newest reports against the 3 before them.

    Reports must be ordered newest first. Fewer than 6 reports is always stable.
    """
    if len(reports) < 2 * TREND_WINDOW:
        return TREND_STABLE
    recent = _mean([r.line_length for r in reports[:TREND_WINDOW]])
    previous = _mean([r.line_length for r in reports[TREND_WINDOW:2 * TREND_WINDOW]])
    if recent > previous + TREND_THRESHOLD:
        return TREND_UP
    if recent < previous - TREND_THRESHOLD:
        return TREND_DOWN
    return TREND_STABLE


def compute_booth_status(booth: MerchBooth, reports: Sequence[LineReport]) -> BoothStatus:
    """Aggregate the newest-first reports of one booth (at most REPORT_WINDOW used)."""
    reports = list(reports)[:REPORT_WINDOW]
    if not reports:
        return BoothStatus(
            booth=booth,
            avg_line_length=0,
            avg_wait_time=0,
            last_reported_at="",
            report_count=0,
            trend=TREND_STABLE,
        )

    waits = [r.wait_time_minutes for r in reports if r.wait_time_minutes is not None]
    newest = reports[0].reported_at
    return BoothStatus(
        booth=booth,
        avg_line_length=round_half_up(_mean([r.line_length for r in reports])),
        avg_wait_time=round_half_up(_mean(waits)) if waits else 0,
        last_reported_at=newest.isoformat() if isinstance(newest, datetime) else str(newest),
        report_count=len(reports),
        trend=compute_trend(reports),
    )


def sort_statuses(statuses: Iterable[BoothStatus]) -> List[BoothStatus]:
    """Shortest line first. Ties keep their fetch order."""
    return sorted(statuses, key=lambda s: s.avg_line_length)


def time_ago(timestamp: str, now: Optional[datetime] = None) -> str:
    """Human label for how long ago the newest report came in."""
    if not timestamp:
        return "No reports"
    reported = datetime.fromisoformat(timestamp)
    if now is None:
        now = datetime.now(reported.tzinfo) if reported.tzinfo else utcnow()
    diff_minutes = math.floor((now - reported).total_seconds() / 60)

    if diff_minutes < 1:
        return "Just now"
    if diff_minutes < 60:
        return f"{diff_minutes}m ago"
    diff_hours = diff_minutes // 60
    if diff_hours < 24:
        return f"{diff_hours}h ago"
    return "Over 24h ago"
