"""Unit tests for issue cloning and best-effort epic propagation."""

from __future__ import annotations

import pytest
from rich.console import Console

from gitlab_tasks.gitlab.client import TrackerError
from gitlab_tasks.gitlab.models import Issue, Project
from gitlab_tasks.session.cloner import (
    IssueCloner,
    NotePostResult,
    epic_command,
    iteration_command,
)
from gitlab_tasks.session.events import ShowTaskOperations
from gitlab_tasks.session.state import SessionContext
from tests.helpers import FakeGateway, ScriptedPrompter, output


@pytest.fixture
def selected(context: SessionContext, project: Project) -> SessionContext:
    context.select_project(project)
    return context


def _cloner(
    gateway: FakeGateway, prompter: ScriptedPrompter, context: SessionContext, console: Console
) -> IssueCloner:
    return IssueCloner(gateway=gateway, prompter=prompter, context=context, console=console)


def test_command_templates() -> None:
    assert epic_command("grp&9") == "/epic grp&9"
    assert iteration_command("S2 Dev Start FE-BE") == '/iteration *iteration:"S2 Dev Start FE-BE"'
    assert iteration_command(None) == '/iteration *iteration:""'


def test_clone_without_epic_copies_labels_and_posts_nothing(
    gateway: FakeGateway,
    selected: SessionContext,
    console: Console,
    project: Project,
    plain_issue: Issue,
) -> None:
    selected.select_issue(plain_issue)
    prompter = ScriptedPrompter([("title", "Fix login (copy)")])

    request = _cloner(gateway, prompter, selected, console).clone_issue(project, plain_issue)

    assert len(gateway.created) == 1
    clone = gateway.created[0]
    assert clone.title == "Fix login (copy)"
    assert clone.labels == ("bug",)
    assert gateway.discussions == []
    assert request == ShowTaskOperations(project=project, issue=clone)
    assert selected.state.issue == clone
    assert f"Cloned as {clone.iid} - Fix login (copy)" in output(console)


def test_clone_passes_a_copy_of_the_labels(
    gateway: FakeGateway, selected: SessionContext, console: Console, project: Project
) -> None:
    source = Issue(id=1, iid=1, project_id=1, title="T", labels=("a", "b"))

    outcome = _cloner(gateway, ScriptedPrompter([]), selected, console).clone(
        project=project, source=source, title="T2"
    )

    passed = gateway.created_labels[0]
    assert isinstance(passed, list)
    assert passed == ["a", "b"]
    passed.append("mutated")
    assert outcome.issue.labels == ("a", "b")
    assert source.labels == ("a", "b")


def test_clone_with_epic_posts_both_notes(
    gateway: FakeGateway,
    selected: SessionContext,
    console: Console,
    project: Project,
    epic_issue: Issue,
) -> None:
    selected.set_iteration("S2 Dev Start FE-BE")

    outcome = _cloner(gateway, ScriptedPrompter([]), selected, console).clone(
        project=project, source=epic_issue, title="SSO follow-up"
    )

    clone = outcome.issue
    assert clone.labels == ("feature", "auth")
    assert gateway.discussions == [
        (project.id, clone.iid, "/epic grp&9"),
        (project.id, clone.iid, '/iteration *iteration:"S2 Dev Start FE-BE"'),
    ]
    assert outcome.notes == (
        NotePostResult(command="/epic grp&9", ok=True),
        NotePostResult(command='/iteration *iteration:"S2 Dev Start FE-BE"', ok=True),
    )


@pytest.mark.parametrize("failing", ["/epic", "/iteration", "/"])
def test_note_failures_do_not_abort_the_clone(
    gateway: FakeGateway,
    selected: SessionContext,
    console: Console,
    project: Project,
    epic_issue: Issue,
    failing: str,
) -> None:
    gateway.discussion_errors[failing] = TrackerError("400 Bad Request")
    selected.select_issue(epic_issue)
    prompter = ScriptedPrompter([("title", "SSO follow-up")])

    request = _cloner(gateway, prompter, selected, console).clone_issue(project, epic_issue)

    assert len(gateway.created) == 1
    clone = gateway.created[0]
    assert len(gateway.discussions) == 2
    assert request == ShowTaskOperations(project=project, issue=clone)
    assert selected.state.issue == clone
    assert "Could not apply" in output(console)


def test_failed_note_is_reported_in_outcome(
    gateway: FakeGateway,
    selected: SessionContext,
    console: Console,
    project: Project,
    epic_issue: Issue,
) -> None:
    gateway.discussion_errors["/epic"] = TrackerError("400 Bad Request")

    outcome = _cloner(gateway, ScriptedPrompter([]), selected, console).clone(
        project=project, source=epic_issue, title="SSO follow-up"
    )

    assert [n.ok for n in outcome.notes] == [False, True]
    assert outcome.notes[0].error == "400 Bad Request"


def test_unexpected_note_error_propagates(
    gateway: FakeGateway,
    selected: SessionContext,
    console: Console,
    project: Project,
    epic_issue: Issue,
) -> None:
    gateway.discussion_errors["/epic"] = RuntimeError("bug in gateway")

    with pytest.raises(RuntimeError):
        _cloner(gateway, ScriptedPrompter([]), selected, console).clone(
            project=project, source=epic_issue, title="SSO follow-up"
        )

    assert len(gateway.created) == 1


@pytest.mark.parametrize("title", [None, "", "   "])
def test_blank_title_aborts_without_mutation(
    gateway: FakeGateway,
    selected: SessionContext,
    console: Console,
    project: Project,
    plain_issue: Issue,
    title: str | None,
) -> None:
    selected.select_issue(plain_issue)
    prompter = ScriptedPrompter([("title", title)])

    request = _cloner(gateway, prompter, selected, console).clone_issue(project, plain_issue)

    assert request == ShowTaskOperations(project=project, issue=plain_issue)
    assert gateway.created == []
    assert selected.state.issue == plain_issue


def test_missing_source_is_a_noop(
    gateway: FakeGateway, selected: SessionContext, console: Console, project: Project
) -> None:
    prompter = ScriptedPrompter([])
    assert _cloner(gateway, prompter, selected, console).clone_issue(project, None) is None
    assert prompter.asked == []
