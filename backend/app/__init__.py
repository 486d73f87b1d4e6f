"""Catalog API Package — users, courses and products over MongoDB.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
