from __future__ import annotations

from enum import Enum

from rich.console import Console
from rich.markup import escape

from gitlab_tasks.gitlab.models import Issue, Project
from gitlab_tasks.ui.prompts import Choice, Prompter

from .events import (
    ChangeIteration,
    CloneIssue,
    Exit,
    SelectIssue,
    SelectProject,
    ShowTaskOperations,
    Transition,
)
from .state import SessionContext
from .viewer import IssueViewer


class TaskAction(str, Enum):
    SHOW = "Show task"
    CHANGE = "Change task"
    CLONE = "Clone task"
    SELECT_PROJECT = "Select project"
    CHANGE_ITERATION = "Change iteration"
    EXIT = "Exit"


def menu_message(iteration: str | None) -> str:
    return f"Actions [{iteration}]" if iteration else "Actions"


class TaskMenu:
    """The hub of the session: every action on a selected issue starts here."""

    def __init__(
        self,
        *,
        prompter: Prompter,
        context: SessionContext,
        viewer: IssueViewer,
        console: Console,
    ) -> None:
        self._prompter = prompter
        self._context = context
        self._viewer = viewer
        self._console = console

    def task_operations(self, project: Project | None, issue: Issue | None) -> Transition | None:
        if project is None or issue is None:
            return None

        self._console.print(
            f"[bold]{escape(project.path)}[/bold] >> {escape(issue.display_name)}"
        )
        action = self._prompter.select(
            "task",
            menu_message(self._context.state.iteration),
            [Choice(a.value, a) for a in TaskAction],
        )

        if action is TaskAction.SHOW:
            self._viewer.print_issue(issue)
            return ShowTaskOperations(project=project, issue=issue)
        if action is TaskAction.CHANGE:
            return SelectIssue(project=project)
        if action is TaskAction.CLONE:
            return CloneIssue(project=project, issue=issue)
        if action is TaskAction.SELECT_PROJECT:
            self._context.reset_project()
            return SelectProject()
        if action is TaskAction.CHANGE_ITERATION:
            return ChangeIteration()
        return Exit()
