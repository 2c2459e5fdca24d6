from . import users, projects, invitations, tasks, notifications

__all__ = ["users", "projects", "invitations", "tasks", "notifications"]
