"""Wire the session components into a router."""

from __future__ import annotations

from typing import cast

from rich.console import Console

from gitlab_tasks.gitlab.client import TrackerGateway
from gitlab_tasks.ui.prompts import Prompter

from .cloner import IssueCloner
from .events import (
    ChangeIteration,
    CloneIssue,
    SelectIssue,
    SelectProject,
    SessionPhase,
    ShowTaskOperations,
    Transition,
)
from .iteration import IterationSetter
from .navigator import Navigator
from .state import SessionContext, SessionState
from .state_machine import SessionRouter
from .task_menu import TaskMenu
from .viewer import IssueViewer


def build_router(
    *,
    gateway: TrackerGateway,
    prompter: Prompter,
    context: SessionContext,
    console: Console,
) -> SessionRouter:
    viewer = IssueViewer(gateway=gateway, console=console)
    navigator = Navigator(
        gateway=gateway, prompter=prompter, context=context, viewer=viewer, console=console
    )
    menu = TaskMenu(prompter=prompter, context=context, viewer=viewer, console=console)
    cloner = IssueCloner(gateway=gateway, prompter=prompter, context=context, console=console)
    iteration = IterationSetter(prompter=prompter, context=context)

    def _select_project(_request: Transition) -> Transition | None:
        return navigator.select_project()

    def _select_issue(request: Transition) -> Transition | None:
        return navigator.select_issue(cast(SelectIssue, request).project)

    def _task_operations(request: Transition) -> Transition | None:
        shown = cast(ShowTaskOperations, request)
        return menu.task_operations(shown.project, shown.issue)

    def _clone_issue(request: Transition) -> Transition | None:
        clone = cast(CloneIssue, request)
        return cloner.clone_issue(clone.project, clone.issue)

    def _change_iteration(_request: Transition) -> Transition | None:
        return iteration.change_iteration()

    return SessionRouter(
        {
            SelectProject: _select_project,
            SelectIssue: _select_issue,
            ShowTaskOperations: _task_operations,
            CloneIssue: _clone_issue,
            ChangeIteration: _change_iteration,
        }
    )


def initial_transition(state: SessionState) -> Transition:
    """Resume where the previous run left off."""

    if state.project is None:
        return SelectProject()
    if state.issue is None:
        return SelectIssue(project=state.project)
    return ShowTaskOperations(project=state.project, issue=state.issue)


def run_session(
    *,
    gateway: TrackerGateway,
    prompter: Prompter,
    context: SessionContext,
    console: Console,
) -> int:
    router = build_router(gateway=gateway, prompter=prompter, context=context, console=console)
    code = router.run(initial_transition(context.state))
    if router.phase is SessionPhase.EXIT:
        console.print("[dim]Goodbye![/dim]")
    return code
