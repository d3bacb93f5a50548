"""Infrastructure Layer: logging setup and other cross-cutting concerns."""
