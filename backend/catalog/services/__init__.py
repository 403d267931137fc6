"""Services — IO-bound helpers used by routes: query composition, store rules, tokens.

Invariants:
    - Services never import from api/
    - Token and store-rule helpers flush only; routes commit once via commit_or_conflict
"""
