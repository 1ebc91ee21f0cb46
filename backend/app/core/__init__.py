"""Core Layer — pure domain logic, no IO, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Validation, filter construction and cache-key derivation are pure and deterministic
    - repository_protocols.py only declares the async contracts infrastructure fulfils

Design Decisions:
    - Functional core separated from imperative shell
"""
