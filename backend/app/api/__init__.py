"""API Layer — FastAPI routes, the envelope interception stage and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return the standard six-field envelope
"""
