"""Infrastructure layer: in-memory adapters and observability."""
