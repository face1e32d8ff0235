"""
Application Configuration
=========================
Central config loaded from environment variables.
"""

import os

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./concert_buddy.db")

# Handle Railway's postgres:// vs postgresql://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

# CORS origins (comma-separated in env, or * for dev)
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")

# Authentication
AUTH_ENABLED = os.getenv("AUTH_ENABLED", "true").lower() == "true"

# Rate limits (slowapi syntax)
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
REPORT_RATE_LIMIT = os.getenv("REPORT_RATE_LIMIT", "20/minute")
LOCATION_RATE_LIMIT = os.getenv("LOCATION_RATE_LIMIT", "120/minute")

# Booth line aggregation refresh while a venue is watched
BOOTH_REFRESH_SECONDS = float(os.getenv("BOOTH_REFRESH_SECONDS", "30"))

# Insert demo venues and merch booths on startup
SEED_DEMO_DATA = os.getenv("SEED_DEMO_DATA", "false").lower() == "true"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
