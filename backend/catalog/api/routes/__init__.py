"""Route Modules — one file per resource/concern.

Invariants:
    - Each module defines its own APIRouter with a resource prefix and tags
    - main.py mounts every router under the configured API prefix
    - Routes stay thin: lookups, rules and token handling live in services/

Design Decisions:
    - Explicit registration in main.py over auto-discovery
"""
