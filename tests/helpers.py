"""Fakes shared by the unit tests."""

from __future__ import annotations

import io
from collections import deque
from collections.abc import Sequence
from typing import TypeVar

from rich.console import Console

from gitlab_tasks.gitlab.models import Epic, Issue, Project
from gitlab_tasks.ui.prompts import Choice, PromptCancelled, match_choice

T = TypeVar("T")

CANCEL = object()


class FakeGateway:
    """In-memory tracker that records every mutation."""

    def __init__(
        self,
        *,
        projects: list[Project] | None = None,
        issues: dict[int, list[Issue]] | None = None,
        epics: list[Epic] | None = None,
    ) -> None:
        self.projects = list(projects or [])
        self.issues = {k: list(v) for k, v in (issues or {}).items()}
        self.epics = {(e.group_id, e.iid): e for e in (epics or [])}
        self.created: list[Issue] = []
        self.created_labels: list[Sequence[str]] = []
        self.discussions: list[tuple[int, int, str]] = []
        self.discussion_errors: dict[str, Exception] = {}
        self._next_iid = 100

    def list_projects(self) -> list[Project]:
        return list(self.projects)

    def list_issues(self, *, project_id: int) -> list[Issue]:
        return list(self.issues.get(project_id, []))

    def create_issue(self, *, project_id: int, title: str, labels: Sequence[str]) -> Issue:
        self._next_iid += 1
        self.created_labels.append(labels)
        issue = Issue(
            id=1000 + self._next_iid,
            iid=self._next_iid,
            project_id=project_id,
            title=title,
            web_url=f"https://gitlab.example.com/p/-/issues/{self._next_iid}",
            labels=tuple(labels),
        )
        self.created.append(issue)
        self.issues.setdefault(project_id, []).append(issue)
        return issue

    def get_epic(self, *, group_id: int, epic_iid: int) -> Epic:
        return self.epics[(group_id, epic_iid)]

    def create_issue_discussion(self, *, project_id: int, issue_iid: int, body: str) -> None:
        self.discussions.append((project_id, issue_iid, body))
        for prefix, error in self.discussion_errors.items():
            if body.startswith(prefix):
                raise error


class ScriptedPrompter:
    """Answers prompts from a script of (prompt name, answer) pairs.

    Select answers are matched against choice labels or keys the way
    command-line answers are; list positions are not accepted. `CANCEL` raises
    `PromptCancelled`; an unscripted prompt fails the test.
    """

    def __init__(self, script: list[tuple[str, object]]) -> None:
        self._script = deque(script)
        self.asked: list[tuple[str, str]] = []

    @property
    def remaining(self) -> int:
        return len(self._script)

    def _next(self, name: str, message: str) -> str | None:
        self.asked.append((name, message))
        if not self._script:
            raise AssertionError(f"Unexpected prompt {name!r}: {message}")
        expected, answer = self._script.popleft()
        assert expected == name, f"Expected prompt {expected!r}, got {name!r}"
        if answer is CANCEL:
            raise PromptCancelled(message)
        assert answer is None or isinstance(answer, str)
        return answer

    def select(
        self,
        name: str,
        message: str,
        choices: Sequence[Choice[T]],
        *,
        autocomplete: bool = False,
    ) -> T:
        answer = self._next(name, message)
        assert answer is not None
        matched = match_choice(choices, answer, positional=False)
        assert matched is not None, f"No choice matches {answer!r}"
        return matched.value

    def text(self, name: str, message: str) -> str | None:
        answer = self._next(name, message)
        return (answer or "").strip() or None


def output(console: Console) -> str:
    file = console.file
    assert isinstance(file, io.StringIO)
    return file.getvalue()
