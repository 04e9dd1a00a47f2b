"""
ZenTask: single-user task list with a small HTTP API and an optimistic client.

Subpackages:
- tasks: data structures, ordering rules and the persistent TaskStore
- storage: key-value backends used by the TaskStore
- server: Flask app exposing the task API
- client: HTTP client + optimistic client state store
- cli / connectors: command-line entrypoint and console front-end
"""

__version__ = "0.1.0"
