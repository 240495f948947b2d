"""Infrastructure Layer: database access, view cache, and logging.

Invariants:
    - Implements the Protocols declared in core/repository_protocols.py
    - Driver exceptions never escape: SQLAlchemy errors become DatabaseError
"""
