"""Infrastructure layer: persistence, security, and services."""
