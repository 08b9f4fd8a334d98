"""Test configuration and fixtures."""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from rich.console import Console

from gitlab_tasks.gitlab.models import Epic, EpicLink, Issue, Project
from gitlab_tasks.session.state import SessionContext, SessionStore
from tests.helpers import FakeGateway


@pytest.fixture
def console() -> Console:
    """A console that records plain text output."""
    return Console(file=io.StringIO(), width=200, color_system=None)


@pytest.fixture
def store(tmp_path: Path) -> SessionStore:
    return SessionStore(tmp_path / "state" / "config.json")


@pytest.fixture
def context(store: SessionStore) -> SessionContext:
    return SessionContext(store)


@pytest.fixture
def project() -> Project:
    return Project(id=1, path="p1", path_with_namespace="acme/p1")


@pytest.fixture
def other_project() -> Project:
    return Project(id=2, path="p2", path_with_namespace="acme/p2")


@pytest.fixture
def plain_issue() -> Issue:
    return Issue(
        id=11,
        iid=3,
        project_id=1,
        title="Fix login",
        web_url="https://gitlab.example.com/acme/p1/-/issues/3",
        labels=("bug",),
    )


@pytest.fixture
def epic() -> Epic:
    return Epic(group_id=5, iid=9, reference="grp&9", title="Login epic")


@pytest.fixture
def epic_issue() -> Issue:
    return Issue(
        id=12,
        iid=4,
        project_id=1,
        title="Add SSO",
        web_url="https://gitlab.example.com/acme/p1/-/issues/4",
        labels=("feature", "auth"),
        epic=EpicLink(group_id=5, iid=9, title="Login epic"),
    )


@pytest.fixture
def gateway(
    project: Project, plain_issue: Issue, epic_issue: Issue, epic: Epic, other_project: Project
) -> FakeGateway:
    return FakeGateway(
        projects=[project, other_project],
        issues={project.id: [plain_issue, epic_issue]},
        epics=[epic],
    )
