"""Core Layer — pure response pipeline logic, no IO, no async, no driver calls.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - All functions are pure apart from reading the clock
"""
