"""Application use cases (orchestrate domain and repositories)."""
