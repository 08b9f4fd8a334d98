from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from gitlab_tasks.gitlab.models import Issue, Project


class SessionPhase(str, Enum):
    UNINITIALIZED = "uninitialized"
    PROJECT_SELECTION = "project_selection"
    ISSUE_SELECTION = "issue_selection"
    TASK_MENU = "task_menu"
    CLONING = "cloning"
    ITERATION_EDIT = "iteration_edit"
    EXIT = "exit"


@dataclass(frozen=True, slots=True)
class SelectProject:
    phase: ClassVar[SessionPhase] = SessionPhase.PROJECT_SELECTION


@dataclass(frozen=True, slots=True)
class SelectIssue:
    """Pick an issue of `project`. A missing project makes the handler a no-op."""

    phase: ClassVar[SessionPhase] = SessionPhase.ISSUE_SELECTION

    project: Project | None


@dataclass(frozen=True, slots=True)
class ShowTaskOperations:
    phase: ClassVar[SessionPhase] = SessionPhase.TASK_MENU

    project: Project | None
    issue: Issue | None


@dataclass(frozen=True, slots=True)
class CloneIssue:
    phase: ClassVar[SessionPhase] = SessionPhase.CLONING

    project: Project | None
    issue: Issue | None


@dataclass(frozen=True, slots=True)
class ChangeIteration:
    phase: ClassVar[SessionPhase] = SessionPhase.ITERATION_EDIT


@dataclass(frozen=True, slots=True)
class Exit:
    phase: ClassVar[SessionPhase] = SessionPhase.EXIT

    code: int = 0


Transition = SelectProject | SelectIssue | ShowTaskOperations | CloneIssue | ChangeIteration | Exit

HANDLED_TRANSITIONS: tuple[type[Transition], ...] = (
    SelectProject,
    SelectIssue,
    ShowTaskOperations,
    CloneIssue,
    ChangeIteration,
)
