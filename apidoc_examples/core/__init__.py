"""Core Layer: route trees, tagged-union encoding and API documents.

Invariants:
    - No module in core/ imports from api/, infrastructure/ or FastAPI
    - All functions are pure and deterministic
"""
