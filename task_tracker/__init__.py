"""
Task Tracker Package

Multi-user task tracking backend: authentication, role-based task
management and a review workflow (pending -> in progress -> review -> done).

Usage:
    from task_tracker.models import User, Task
    from task_tracker.core.config import settings
"""

__version__ = "1.0.0"
