"""Services Layer — resource lifecycle rules over the repository protocol.

Invariants:
    - Services raise ApiError subclasses; they never build responses
"""
