"""Services Layer — orchestrates core validation around store and cache IO.

Invariants:
    - Services depend on the OrderStore protocol (core/repository_protocols.py), never on SQL
    - No HTTP concerns here; routes translate errors via global handlers

Design Decisions:
    - Functional core, imperative shell: pure checks in core/, IO sequencing here
"""
