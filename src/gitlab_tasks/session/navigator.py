"""Project and issue selection."""

from __future__ import annotations

import logging

from rich.console import Console

from gitlab_tasks.gitlab.client import TrackerGateway
from gitlab_tasks.gitlab.models import Project
from gitlab_tasks.ui.prompts import Choice, Prompter

from .events import Exit, SelectIssue, SelectProject, ShowTaskOperations, Transition
from .state import SessionContext
from .viewer import IssueViewer

logger = logging.getLogger(__name__)


class Navigator:
    def __init__(
        self,
        *,
        gateway: TrackerGateway,
        prompter: Prompter,
        context: SessionContext,
        viewer: IssueViewer,
        console: Console,
    ) -> None:
        self._gateway = gateway
        self._prompter = prompter
        self._context = context
        self._viewer = viewer
        self._console = console

    def select_project(self) -> Transition | None:
        projects = self._gateway.list_projects()
        if not projects:
            logger.warning("No projects visible to the configured token")
            self._console.print("[yellow]No projects are visible with this token[/yellow]")
            retry = self._prompter.select(
                "retry",
                "No projects found",
                [Choice("Retry", True), Choice("Exit", False)],
            )
            return SelectProject() if retry else Exit()

        project = self._prompter.select(
            "project",
            "Select your project",
            [Choice(p.path, p, key=p.path) for p in projects],
        )
        self._context.select_project(project)
        return SelectIssue(project=project)

    def select_issue(self, project: Project | None) -> Transition | None:
        if project is None:
            return None

        self._console.print("Select an issue")
        issues = self._gateway.list_issues(project_id=project.id)
        if not issues:
            logger.info("Project has no issues", extra={"project_id": project.id})
            self._console.print("Project without tasks")
            return SelectProject()

        issue = self._prompter.select(
            "issue",
            "Select your issue",
            [Choice(i.display_name, i, key=str(i.iid)) for i in issues],
            autocomplete=True,
        )
        self._viewer.print_issue(issue)
        self._context.select_issue(issue)
        return ShowTaskOperations(project=project, issue=issue)
