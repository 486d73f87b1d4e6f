"""Route Modules — one file per resource/concern.

Invariants:
    - Each module defines its own APIRouter with prefix, tags and route_class=EnvelopeRoute
    - Routes never contain business logic (delegate to services)
"""
