"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskFilter, ApiResponse)
- ordering.py: pure ordering rules shared by server and client
- task_store.py: key-value backed TaskStore (single read-modify-write per call)
"""
