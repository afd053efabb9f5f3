"""Communiserver: role-based access backend for the community administration portal."""

__version__ = "0.1.0"
