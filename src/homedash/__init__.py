"""Configuration store for a self-hosted service dashboard."""

__version__ = "0.1.0"
