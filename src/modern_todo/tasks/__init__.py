"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority, SelectionState) + JSON codec
- task_filters.py: search / category / completion predicates
- task_store.py: observable in-memory store persisted to a preference repo
- preferences.py: SQLite-backed key-value preference repo
- task_scheduler.py: due-date reminders + polling delivery loop
- task_api.py: editing helpers (validation, id generation)
"""
