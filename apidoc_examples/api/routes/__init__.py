"""Route Modules: one file per resource, each returning route tables.

Invariants:
    - Handlers are built inside table factories so the ExampleContext they
      read is captured at registration time
    - Handlers return constants; they read nothing from the request
"""
