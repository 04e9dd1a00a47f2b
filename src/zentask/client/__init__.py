"""
Client side.

Components:
- api_client.py: async HTTP client for the task API (httpx)
- state.py: immutable ClientState + reducer functions
- sync.py: optimistic apply / compensate helper
- store.py: TaskClientStore owned by the UI root
"""
