"""Infrastructure Layer — storage backends, the document store, and logging.

Invariants:
    - Storage failures and timeouts surface as PersistenceError
    - Only the document store hands Documents to the core

Design Decisions:
    - Backends speak JSON snapshots; the store converts them to Documents
"""
