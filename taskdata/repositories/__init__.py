"""Repositories — SQLAlchemy-backed stores for tasks and metadata.

Invariants:
    - Model objects passed in and out are detached value carriers
    - Writes go through DatabaseSessionManager.session() (one unit of work each)
    - Reads that return rows hand back a RowCursor the caller must release
"""
