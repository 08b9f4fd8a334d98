from __future__ import annotations

from rich.console import Console
from rich.markup import escape

from gitlab_tasks.gitlab.client import TrackerGateway
from gitlab_tasks.gitlab.models import Issue


class IssueViewer:
    """Render an issue on the console. Never touches session state."""

    def __init__(self, *, gateway: TrackerGateway, console: Console) -> None:
        self._gateway = gateway
        self._console = console

    def print_issue(self, issue: Issue) -> None:
        self._console.clear()
        self._console.print(f"[blue]id[/blue]: {issue.iid} title: {escape(issue.title)}")
        self._console.print(f"URL: {escape(issue.web_url)}")
        labels = ", ".join(issue.labels) if issue.labels else "-"
        self._console.print(f"labels: {escape(labels)}")

        if issue.epic is not None:
            epic = self._gateway.get_epic(group_id=issue.epic.group_id, epic_iid=issue.epic.iid)
            self._console.print(escape(epic.reference))
            self._console.print(f"Epic: {escape(epic.title)}")
