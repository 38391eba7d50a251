"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus, TaskPriority, TaskStats)
- task_store.py: in-memory store + query/update helpers
- task_scheduler.py: reminder scheduler (hourly reminders, daily digest)
"""
