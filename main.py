"""
Concert Buddy - Backend Entry Point
===================================
Share your seat with friends on the venue seating chart and check merch
booth lines during a show.

Run locally:
    python main.py
or:
    uvicorn main:app --reload
"""

import os

from concert_buddy import app  # noqa: F401

if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
