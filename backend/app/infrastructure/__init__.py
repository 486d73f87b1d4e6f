"""Infrastructure Layer — document store client and logging setup.

Invariants:
    - Driver exceptions never escape unmapped (see database.driver_errors)
"""
