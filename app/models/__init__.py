"""ORM Models — SQLAlchemy declarative models.

Invariants:
    - All models inherit from Base (db/base.py)
    - The ledger is stored as one JSON document row per ledger name

Design Decisions:
    - Models imported here so Base.metadata is complete for create_all and alembic
"""

from app.models.ledger_document import LedgerDocument  # noqa: F401
