"""API Layer: FastAPI app factory, routing, middleware and error handlers.

Invariants:
    - Every example app is built by app_factory.create_example_app()
    - All error responses share the ExampleError envelope
"""
