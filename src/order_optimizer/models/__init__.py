"""Domain models and error kinds."""
