"""Infrastructure layer - Adapters, configuration and scheduling."""
