"""apidoc-examples: FastAPI example servers for route nesting and generated API docs.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
