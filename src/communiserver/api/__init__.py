"""HTTP API package: shared dependencies and the root router."""
