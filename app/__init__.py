"""Goal Ledger Application Package — savings goals, deposits and an activity journal.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
