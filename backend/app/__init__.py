"""User Service — HTTP CRUD microservice over a single users table.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
