"""Key-value storage backends (SQLite, in-memory)."""
