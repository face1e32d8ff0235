"""
Pydantic Models
===============
Request/response schemas for API endpoints.
"""

from typing import Optional

from pydantic import BaseModel, Field


class UserRegister(BaseModel):
    """Sign up; the returned API key is the login session."""
    email: str
    display_name: Optional[str] = None


class VenueCreate(BaseModel):
    """Seed a venue with its seating chart layout JSON string."""
    id: str
    name: str
    description: str = ""
    seating_chart_data: str = '{"sections": []}'


class BoothCreate(BaseModel):
    """Seed a merch booth at a venue."""
    id: str
    name: str
    location_x: float = 0
    location_y: float = 0
    description: str = ""


class LineReportIn(BaseModel):
    """One line length observation. Only presence is checked, not range."""
    line_length: int
    wait_time_minutes: Optional[int] = None


class RoomCreate(BaseModel):
    name: str = Field(min_length=1)
    venue_id: str


class RoomJoin(BaseModel):
    code: str = Field(min_length=1)


class LocationIn(BaseModel):
    """A location already in chart coordinates."""
    x: float
    y: float
    seat_info: Optional[str] = None


class ChartClick(BaseModel):
    """Raw pointer click plus the viewer's viewport at the time of the click."""
    px: float
    py: float
    rect_left: float = 0
    rect_top: float = 0
    zoom: float = Field(default=1.0, ge=0.5, le=3.0)
    pan_x: float = 0
    pan_y: float = 0
    is_dragging: bool = False
