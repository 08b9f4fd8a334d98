"""GitLab Tasks.

An interactive terminal session for working through GitLab issues:
- pick a project and an issue, remembered across runs
- view the issue with its labels and epic
- clone it, carrying labels, epic link and iteration along
"""

__version__ = "0.1.0"

from gitlab_tasks.config import TasksSettings

__all__ = ["__version__", "TasksSettings"]
