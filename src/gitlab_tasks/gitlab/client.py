"""GitLab REST v4 client.

This keeps HTTP calls out of the session components and makes tests easy: the
components only depend on the `TrackerGateway` protocol.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Protocol
from urllib.parse import quote

import requests

from gitlab_tasks.gitlab.models import Epic, EpicLink, Issue, Project

logger = logging.getLogger(__name__)


class TrackerError(Exception):
    """The tracker refused or failed a request."""


class TrackerGateway(Protocol):
    """The tracker operations a session needs.

    `create_issue_discussion` raises `TrackerError` when the note is rejected;
    callers treat that as recoverable.
    """

    def list_projects(self) -> list[Project]: ...

    def list_issues(self, *, project_id: int) -> list[Issue]: ...

    def create_issue(self, *, project_id: int, title: str, labels: Sequence[str]) -> Issue: ...

    def get_epic(self, *, group_id: int, epic_iid: int) -> Epic: ...

    def create_issue_discussion(self, *, project_id: int, issue_iid: int, body: str) -> None: ...


def _require_int(data: dict[str, Any], key: str, *, what: str) -> int:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Invalid {what} response: missing {key}")
    return value


def _str(value: object) -> str:
    return value if isinstance(value, str) else ""


class GitLabClient:
    """Small wrapper around the GitLab REST API for the operations a session needs."""

    def __init__(
        self,
        *,
        token: str,
        base_url: str = "https://gitlab.com",
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        if not token:
            raise ValueError("GitLab token is required")

        self._api_url = base_url.rstrip("/") + "/api/v4"
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "PRIVATE-TOKEN": token,
                "Accept": "application/json",
                "User-Agent": "gitlab-tasks",
            }
        )

    @property
    def api_url(self) -> str:
        return self._api_url

    def _url(self, path: str) -> str:
        return f"{self._api_url}/{path.lstrip('/')}"

    def _get_paginated_json_list(
        self, url: str, *, params: dict[str, object] | None = None
    ) -> list[dict[str, Any]]:
        """Fetch every page of a list endpoint, following `X-Next-Page`."""

        items: list[dict[str, Any]] = []
        page: str | None = "1"
        while page:
            resp = self._session.get(
                url,
                params={**(params or {}), "per_page": 100, "page": page},
                timeout=self._timeout,
            )
            resp.raise_for_status()
            payload = resp.json()
            if not isinstance(payload, list):
                raise ValueError(f"Expected a JSON list from {url}")

            items.extend(p for p in payload if isinstance(p, dict))
            page = (resp.headers.get("X-Next-Page") or "").strip() or None
        return items

    @staticmethod
    def _parse_project(data: dict[str, Any]) -> Project:
        return Project(
            id=_require_int(data, "id", what="project"),
            path=_str(data.get("path")),
            path_with_namespace=_str(data.get("path_with_namespace")),
        )

    @staticmethod
    def _parse_epic_link(data: dict[str, Any]) -> EpicLink | None:
        epic = data.get("epic")
        if not isinstance(epic, dict):
            return None

        group_id = epic.get("group_id")
        iid = epic.get("iid", data.get("epic_iid"))
        if not isinstance(group_id, int) or not isinstance(iid, int):
            logger.debug("Ignoring incomplete epic link", extra={"epic": epic})
            return None
        return EpicLink(group_id=group_id, iid=iid, title=_str(epic.get("title")))

    @classmethod
    def _parse_issue(cls, data: dict[str, Any]) -> Issue:
        raw_labels = data.get("labels")
        labels = (
            tuple(lbl for lbl in raw_labels if isinstance(lbl, str))
            if isinstance(raw_labels, list)
            else ()
        )
        return Issue(
            id=_require_int(data, "id", what="issue"),
            iid=_require_int(data, "iid", what="issue"),
            project_id=_require_int(data, "project_id", what="issue"),
            title=_str(data.get("title")),
            web_url=_str(data.get("web_url")),
            labels=labels,
            epic=cls._parse_epic_link(data),
        )

    def list_projects(self) -> list[Project]:
        """Return every project visible to the token."""

        payload = self._get_paginated_json_list(
            self._url("projects"), params={"order_by": "path", "sort": "asc"}
        )
        projects = [self._parse_project(p) for p in payload]
        logger.info("Fetched projects", extra={"count": len(projects)})
        return projects

    def list_issues(self, *, project_id: int) -> list[Issue]:
        payload = self._get_paginated_json_list(self._url(f"projects/{project_id}/issues"))
        issues = [self._parse_issue(i) for i in payload]
        logger.info("Fetched issues", extra={"project_id": project_id, "count": len(issues)})
        return issues

    def create_issue(self, *, project_id: int, title: str, labels: Sequence[str]) -> Issue:
        if not title.strip():
            raise ValueError("Issue title is required")

        resp = self._session.post(
            self._url(f"projects/{project_id}/issues"),
            json={"title": title, "labels": ",".join(labels)},
            timeout=self._timeout,
        )
        resp.raise_for_status()
        data: dict[str, Any] = resp.json()
        issue = self._parse_issue(data)
        logger.info(
            "Issue created",
            extra={"project_id": project_id, "iid": issue.iid, "labels": list(issue.labels)},
        )
        return issue

    def get_epic(self, *, group_id: int, epic_iid: int) -> Epic:
        resp = self._session.get(
            self._url(f"groups/{quote(str(group_id), safe='')}/epics/{epic_iid}"),
            timeout=self._timeout,
        )
        resp.raise_for_status()
        data: dict[str, Any] = resp.json()

        references = data.get("references")
        reference = _str(references.get("full")) if isinstance(references, dict) else ""
        if not reference:
            # Older GitLab versions only expose the short form.
            reference = _str(data.get("reference"))
        if not reference:
            raise ValueError("Invalid epic response: missing reference")

        return Epic(
            group_id=group_id,
            iid=epic_iid,
            reference=reference,
            title=_str(data.get("title")),
        )

    def create_issue_discussion(self, *, project_id: int, issue_iid: int, body: str) -> None:
        """Start a discussion thread on an issue.

        Quick actions sent this way are subject to GitLab's notes API limits; the
        server may reject some of them even though the same text works in the UI.
        """

        try:
            resp = self._session.post(
                self._url(f"projects/{project_id}/issues/{issue_iid}/discussions"),
                json={"body": body},
                timeout=self._timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            raise TrackerError(str(e)) from e
        logger.debug(
            "Discussion created", extra={"project_id": project_id, "issue_iid": issue_iid}
        )

    def close(self) -> None:
        self._session.close()
