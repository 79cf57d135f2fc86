"""Core Layer — pure ledger logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Time comes in as an argument; functions are deterministic given their inputs

Design Decisions:
    - Functional core separated from imperative shell: core mutates a borrowed
      Document, the store decides whether it is persisted
"""
