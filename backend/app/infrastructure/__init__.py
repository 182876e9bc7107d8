"""Infrastructure Layer — store access and cross-cutting concerns.

Invariants:
    - Store errors are mapped to core/errors.py types before leaving this package
"""
