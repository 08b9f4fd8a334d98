#!/usr/bin/env python3
"""Programmatic clone example.

This uses the session components directly, without the interactive menu:

* load settings from `.env`
* clone an issue, copying labels and (if any) its epic and the stored iteration
* remember the clone as the current issue for the next interactive run
"""

from __future__ import annotations

import argparse
from typing import Sequence

from rich.console import Console

from gitlab_tasks.config import TasksSettings
from gitlab_tasks.gitlab.client import GitLabClient
from gitlab_tasks.logging import configure_logging
from gitlab_tasks.session.cloner import IssueCloner
from gitlab_tasks.session.state import SessionContext, SessionStore
from gitlab_tasks.ui.prompts import TerminalPrompter


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Clone a GitLab issue (programmatic example).")
    parser.add_argument("--project", required=True, help="Project path, e.g. 'api'")
    parser.add_argument("--issue", required=True, type=int, help="Source issue iid")
    parser.add_argument("--title", required=True, help="Title of the clone")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = TasksSettings()
    configure_logging(settings.log_level, settings.log_file)

    console = Console()
    context = SessionContext(SessionStore(settings.state_path))
    gitlab = GitLabClient(
        token=settings.gitlab_token,
        base_url=settings.gitlab_host,
        timeout=settings.request_timeout,
    )
    try:
        project = next((p for p in gitlab.list_projects() if p.path == args.project), None)
        if project is None:
            print(f"Project not found: {args.project}")
            return 1
        source = next(
            (i for i in gitlab.list_issues(project_id=project.id) if i.iid == args.issue), None
        )
        if source is None:
            print(f"Issue not found: {args.project}#{args.issue}")
            return 1

        cloner = IssueCloner(
            gateway=gitlab,
            prompter=TerminalPrompter(console),
            context=context,
            console=console,
        )
        outcome = cloner.clone(project=project, source=source, title=args.title)
        context.select_project(project)
        context.select_issue(outcome.issue)

        print(f"Created #{outcome.issue.iid}: {outcome.issue.web_url}")
        for note in outcome.notes:
            print(f"  {note.command}: {'applied' if note.ok else 'rejected'}")
        return 0
    finally:
        gitlab.close()


if __name__ == "__main__":
    raise SystemExit(main())
