"""
Web dashboard module for Zone01 Profile.

PURPOSE: FastAPI-based web UI showing the signed-in student's profile.
AI CONTEXT: Server-side rendered HTML with inline SVG charts; no JavaScript.

FEATURES:
- Sign-in form backed by the platform's Basic-auth endpoint
- Profile page with level ring, stat cards, audit bars and two charts
- Standalone SVG chart endpoints
- JSON endpoint with the full aggregated profile

USAGE:
    # Via CLI
    zone01-profile dashboard

    # Programmatically
    from zone01_profile.web import create_app
    app = create_app()
"""

from .app import create_app, run_dashboard

__all__ = ["create_app", "run_dashboard"]
