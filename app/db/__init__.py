"""Database Base — SQLAlchemy declarative Base shared by ORM models and alembic.

Invariants:
    - Engine and sessions live in infrastructure/database.py, not here
"""
