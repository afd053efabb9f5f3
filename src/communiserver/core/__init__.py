"""Core infrastructure: configuration-free building blocks shared by all modules."""
