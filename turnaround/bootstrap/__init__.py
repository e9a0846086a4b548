"""Bootstrap wiring for application services and adapters."""
