"""HTTP API server (Flask)."""
