"""
Database Setup
==============
SQLAlchemy table definitions, async database connection, and engine.
The six collections are module-level objects importable by the store and routers.
"""

from datetime import datetime

import databases
import sqlalchemy

from concert_buddy.config import DATABASE_URL as _RAW_DB_URL

# Force psycopg3 dialect for Python 3.13 compatibility
DATABASE_URL = _RAW_DB_URL
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql+psycopg://", 1)
elif DATABASE_URL.startswith("postgresql://"):
    DATABASE_URL = DATABASE_URL.replace("postgresql://", "postgresql+psycopg://", 1)

database = databases.Database(DATABASE_URL)

metadata = sqlalchemy.MetaData()

# Users - API key doubles as the login session
users = sqlalchemy.Table(
    "users",
    metadata,
    sqlalchemy.Column("id", sqlalchemy.String(50), primary_key=True),
    sqlalchemy.Column("email", sqlalchemy.String(200), unique=True, index=True),
    sqlalchemy.Column("display_name", sqlalchemy.String(100), nullable=True),
    sqlalchemy.Column("api_key", sqlalchemy.String(64), index=True),
    sqlalchemy.Column("created_at", sqlalchemy.DateTime, default=datetime.utcnow),
)

# Venues with their seating chart layout stored as a JSON string
venues = sqlalchemy.Table(
    "venues",
    metadata,
    sqlalchemy.Column("id", sqlalchemy.String(50), primary_key=True),
    sqlalchemy.Column("name", sqlalchemy.String(100), index=True),
    sqlalchemy.Column("description", sqlalchemy.Text, default=""),
    sqlalchemy.Column("seating_chart_data", sqlalchemy.Text, default='{"sections": []}'),
    sqlalchemy.Column("created_at", sqlalchemy.DateTime, default=datetime.utcnow),
)

# Rooms - id is the 6-character share code
rooms = sqlalchemy.Table(
    "rooms",
    metadata,
    sqlalchemy.Column("id", sqlalchemy.String(6), primary_key=True),
    sqlalchemy.Column("name", sqlalchemy.String(100)),
    sqlalchemy.Column("venue_id", sqlalchemy.String(50), index=True),
    sqlalchemy.Column("created_by", sqlalchemy.String(50)),
    sqlalchemy.Column("is_active", sqlalchemy.Boolean, default=True),
    sqlalchemy.Column("created_at", sqlalchemy.DateTime, default=datetime.utcnow),
)

# One row per (user, room): id is "<user_id>-<room_id>"
user_locations = sqlalchemy.Table(
    "user_locations",
    metadata,
    sqlalchemy.Column("id", sqlalchemy.String(120), primary_key=True),
    sqlalchemy.Column("room_id", sqlalchemy.String(6), index=True),
    sqlalchemy.Column("user_id", sqlalchemy.String(50), index=True),
    sqlalchemy.Column("user_name", sqlalchemy.String(200)),
    sqlalchemy.Column("user_avatar", sqlalchemy.String(500), nullable=True),
    sqlalchemy.Column("x_position", sqlalchemy.Float),
    sqlalchemy.Column("y_position", sqlalchemy.Float),
    sqlalchemy.Column("section_name", sqlalchemy.String(100), nullable=True),
    sqlalchemy.Column("seat_info", sqlalchemy.String(100), nullable=True),
    sqlalchemy.Column("updated_at", sqlalchemy.DateTime, default=datetime.utcnow, index=True),
)

merch_booths = sqlalchemy.Table(
    "merch_booths",
    metadata,
    sqlalchemy.Column("id", sqlalchemy.String(50), primary_key=True),
    sqlalchemy.Column("venue_id", sqlalchemy.String(50), index=True),
    sqlalchemy.Column("name", sqlalchemy.String(100)),
    sqlalchemy.Column("location_x", sqlalchemy.Float, default=0),
    sqlalchemy.Column("location_y", sqlalchemy.Float, default=0),
    sqlalchemy.Column("description", sqlalchemy.Text, default=""),
    sqlalchemy.Column("created_at", sqlalchemy.DateTime, default=datetime.utcnow),
)

# Append-only line length observations
line_reports = sqlalchemy.Table(
    "line_reports",
    metadata,
    sqlalchemy.Column("id", sqlalchemy.String(50), primary_key=True),
    sqlalchemy.Column("booth_id", sqlalchemy.String(50), index=True),
    sqlalchemy.Column("user_id", sqlalchemy.String(50)),
    sqlalchemy.Column("line_length", sqlalchemy.Integer),
    sqlalchemy.Column("wait_time_minutes", sqlalchemy.Integer, nullable=True),
    sqlalchemy.Column("reported_at", sqlalchemy.DateTime, index=True),
)

engine = sqlalchemy.create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if "sqlite" in DATABASE_URL else {}
)
metadata.create_all(engine)
