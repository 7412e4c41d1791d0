"""Infrastructure Layer — session management, row cursors, logging.

Invariants:
    - Infrastructure never imports from services/
    - Every SQLAlchemy failure is mapped to DatabaseError (core/errors.py)
"""
