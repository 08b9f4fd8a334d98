"""Persistent session state.

The last selected project, issue and iteration tag survive restarts in a small
JSON key-value file. `SessionContext` is the one object that mutates them; it
is passed explicitly to every component that needs it.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from gitlab_tasks.gitlab.models import Issue, Project

logger = logging.getLogger(__name__)

PROJECT_KEY = "project"
ISSUE_KEY = "issue"
ITERATION_KEY = "iteration"


class InvalidSessionState(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class SessionState:
    project: Project | None = None
    issue: Issue | None = None
    iteration: str | None = None

    def __post_init__(self) -> None:
        if self.issue is not None and self.project is None:
            raise InvalidSessionState("An issue can only be selected within a project")


class SessionStore:
    """JSON-file backed key-value store for the session keys."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.warning(
                "Session state file is unreadable; treating as empty",
                extra={"path": str(self._path)},
            )
            return {}

        if not isinstance(raw, dict):
            logger.warning(
                "Session state file has unexpected shape; treating as empty",
                extra={"path": str(self._path)},
            )
            return {}
        return raw

    def _write(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
        )

    def get(self, key: str) -> Any:
        return self._read().get(key)

    def set(self, key: str, value: Any) -> None:  # noqa: A003
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    def load(self) -> SessionState:
        data = self._read()

        project = _validate(Project, data.get(PROJECT_KEY), key=PROJECT_KEY)
        issue = _validate(Issue, data.get(ISSUE_KEY), key=ISSUE_KEY)
        iteration_raw = data.get(ITERATION_KEY)
        iteration = iteration_raw if isinstance(iteration_raw, str) and iteration_raw else None

        if issue is not None and project is None:
            logger.warning("Dropping stored issue without a stored project")
            issue = None

        return SessionState(project=project, issue=issue, iteration=iteration)


def _validate(model: type[Project] | type[Issue], raw: object, *, key: str) -> Any:
    if raw is None:
        return None
    try:
        return model.model_validate(raw)
    except ValidationError:
        logger.warning("Ignoring invalid stored value", extra={"key": key})
        return None


class SessionContext:
    """Owns the current session state and keeps the store in step with it."""

    def __init__(self, store: SessionStore) -> None:
        self._store = store
        self._state = store.load()

    @property
    def state(self) -> SessionState:
        return self._state

    def select_project(self, project: Project) -> SessionState:
        """Make `project` current. Any previous issue belonged to another selection."""

        self._store.set(PROJECT_KEY, project.model_dump(mode="json"))
        self._store.delete(ISSUE_KEY)
        self._state = replace(self._state, project=project, issue=None)
        logger.info("Project selected", extra={"project_id": project.id, "path": project.path})
        return self._state

    def select_issue(self, issue: Issue) -> SessionState:
        if self._state.project is None:
            raise InvalidSessionState("Select a project before selecting an issue")

        self._store.set(ISSUE_KEY, issue.model_dump(mode="json"))
        self._state = replace(self._state, issue=issue)
        logger.info("Issue selected", extra={"project_id": issue.project_id, "iid": issue.iid})
        return self._state

    def set_iteration(self, iteration: str) -> SessionState:
        self._store.set(ITERATION_KEY, iteration)
        self._state = replace(self._state, iteration=iteration)
        logger.info("Iteration changed", extra={"iteration": iteration})
        return self._state

    def reset_project(self) -> SessionState:
        """Forget project and issue together; the iteration tag is kept."""

        self._store.delete(ISSUE_KEY)
        self._store.delete(PROJECT_KEY)
        self._state = replace(self._state, project=None, issue=None)
        logger.info("Project and issue cleared")
        return self._state
