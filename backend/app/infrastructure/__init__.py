"""Infrastructure Layer — database, cache and scheduling adapters.

Invariants:
    - Infrastructure implements the protocols in core/repository_protocols.py
    - All external failures mapped to typed errors (core/errors.py)

Design Decisions:
    - Resilient wrappers over raw clients (ADR: single responsibility)
"""
