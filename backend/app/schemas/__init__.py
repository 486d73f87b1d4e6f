"""Pydantic Schemas — request validation and response documentation.

Invariants:
    - Schemas validate at the system boundary (request bodies)
    - Wire names are camelCase; Python attributes are snake_case

Design Decisions:
    - Response schemas document the envelope payload only; the normalizer,
      not Pydantic, produces the outgoing JSON
"""
