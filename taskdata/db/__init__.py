"""Database Infrastructure — engine factory and SQLAlchemy Base.

Invariants:
    - One engine per DatabaseSessionManager
    - All sessions are synchronous (sqlalchemy.orm.Session)
"""
