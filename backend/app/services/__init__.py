"""Services Layer: mutation handlers orchestrating validation, persistence, invalidation.

Invariants:
    - Handlers depend on core Protocols, never on concrete infrastructure classes
"""
