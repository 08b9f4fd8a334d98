"""Issue cloning.

A clone is a new issue in the same project with the source issue's title
replaced and its labels copied. When the source belongs to an epic, the epic
link and the current iteration tag are added to the clone through quick-action
discussion notes.

The notes are best-effort: GitLab rejects some quick actions sent through the
notes API, so each attempt produces a `NotePostResult` instead of failing the
clone.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rich.console import Console
from rich.markup import escape

from gitlab_tasks.gitlab.client import TrackerError, TrackerGateway
from gitlab_tasks.gitlab.models import Issue, Project
from gitlab_tasks.ui.prompts import Prompter

from .events import ShowTaskOperations, Transition
from .state import SessionContext

logger = logging.getLogger(__name__)


def epic_command(reference: str) -> str:
    return f"/epic {reference}"


def iteration_command(iteration: str | None) -> str:
    return f'/iteration *iteration:"{iteration or ""}"'


@dataclass(frozen=True, slots=True)
class NotePostResult:
    command: str
    ok: bool
    error: str | None = None


@dataclass(frozen=True, slots=True)
class CloneOutcome:
    issue: Issue
    notes: tuple[NotePostResult, ...] = ()


class IssueCloner:
    def __init__(
        self,
        *,
        gateway: TrackerGateway,
        prompter: Prompter,
        context: SessionContext,
        console: Console,
    ) -> None:
        self._gateway = gateway
        self._prompter = prompter
        self._context = context
        self._console = console

    def clone_issue(self, project: Project | None, issue: Issue | None) -> Transition | None:
        if project is None or issue is None:
            return None

        title = self._prompter.text("title", "Add issue title")
        if not title:
            return ShowTaskOperations(project=project, issue=issue)

        outcome = self.clone(project=project, source=issue, title=title)
        self._console.print(f"Cloned as {escape(outcome.issue.display_name)}")
        for note in outcome.notes:
            if not note.ok:
                self._console.print(f"[yellow]Could not apply[/yellow] {escape(note.command)}")

        self._context.select_issue(outcome.issue)
        return ShowTaskOperations(project=project, issue=outcome.issue)

    def clone(self, *, project: Project, source: Issue, title: str) -> CloneOutcome:
        """Create the clone and propagate epic metadata when there is any."""

        created = self._gateway.create_issue(
            project_id=project.id, title=title, labels=list(source.labels)
        )
        logger.info(
            "Issue cloned",
            extra={"project_id": project.id, "source_iid": source.iid, "iid": created.iid},
        )
        if source.epic is None:
            return CloneOutcome(issue=created)

        epic = self._gateway.get_epic(group_id=source.epic.group_id, epic_iid=source.epic.iid)
        notes = (
            self._post_note(project, created, epic_command(epic.reference)),
            self._post_note(project, created, iteration_command(self._context.state.iteration)),
        )
        return CloneOutcome(issue=created, notes=notes)

    def _post_note(self, project: Project, issue: Issue, command: str) -> NotePostResult:
        try:
            self._gateway.create_issue_discussion(
                project_id=project.id, issue_iid=issue.iid, body=command
            )
        except TrackerError as e:
            logger.warning(
                "Quick action note was rejected",
                extra={"project_id": project.id, "iid": issue.iid, "command": command},
            )
            return NotePostResult(command=command, ok=False, error=str(e))
        return NotePostResult(command=command, ok=True)
