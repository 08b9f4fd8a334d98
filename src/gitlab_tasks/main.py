"""CLI entrypoint for the interactive task session."""

from __future__ import annotations

import argparse
import logging
import sys

from pydantic import ValidationError
from rich.console import Console

from gitlab_tasks import __version__
from gitlab_tasks.config import TasksSettings
from gitlab_tasks.gitlab.client import GitLabClient
from gitlab_tasks.logging import configure_logging
from gitlab_tasks.session.app import run_session
from gitlab_tasks.session.state import SessionContext, SessionStore
from gitlab_tasks.ui.prompts import TerminalPrompter

logger = logging.getLogger(__name__)

_OVERRIDE_PROMPTS = ("project", "issue", "title", "iteration")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitlab-tasks",
        description=(
            "Pick a GitLab project and issue, then view or clone it. "
            "The last project, issue and iteration are remembered between runs."
        ),
    )
    parser.add_argument("--version", action="version", version=f"gitlab-tasks {__version__}")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Forget the remembered project and issue before starting",
    )

    answers = parser.add_argument_group(
        "prompt answers", "Answer a prompt up front; it is asked interactively afterwards"
    )
    answers.add_argument("--project", default=None, help="Project path to select")
    answers.add_argument("--issue", default=None, help="Issue iid (or 'iid - title') to select")
    answers.add_argument("--title", default=None, help="Title for the next cloned issue")
    answers.add_argument("--iteration", default=None, help="Iteration name to set")
    return parser


def _prompt_overrides(args: argparse.Namespace) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for name in _OVERRIDE_PROMPTS:
        value = getattr(args, name)
        if value is not None:
            overrides[name] = value
    return overrides


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = TasksSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level, settings.log_file)

    console = Console()
    store = SessionStore(settings.state_path)
    context = SessionContext(store)
    if args.reset:
        context.reset_project()

    gitlab = GitLabClient(
        token=settings.gitlab_token,
        base_url=settings.gitlab_host,
        timeout=settings.request_timeout,
    )
    try:
        return run_session(
            gateway=gitlab,
            prompter=TerminalPrompter(console, overrides=_prompt_overrides(args)),
            context=context,
            console=console,
        )
    except Exception:
        logger.exception("Session failed")
        console.print("[red]Session failed; see the log for details[/red]")
        return 1
    finally:
        gitlab.close()


if __name__ == "__main__":
    raise SystemExit(main())
