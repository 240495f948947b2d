"""Core Layer: pure invoice domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic
    - IO reaches core only through the Protocols in repository_protocols.py
"""
