"""Shared building blocks: errors and ports (Protocols)."""
