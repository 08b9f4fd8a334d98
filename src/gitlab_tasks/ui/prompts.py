"""Prompt primitives for the interactive session.

The session components only see the `Prompter` protocol; `TerminalPrompter`
implements it on top of prompt_toolkit, with rich for the surrounding output.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, FuzzyCompleter, WordCompleter
from rich.console import Console
from rich.markup import escape

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PromptCancelled(Exception):
    """The operator dismissed a prompt (Ctrl-C / Ctrl-D)."""


@dataclass(frozen=True, slots=True)
class Choice(Generic[T]):
    """A labeled value offered by `Prompter.select`.

    `key` is an optional natural identifier (project path, issue iid) that
    command-line answers may use instead of the label.
    """

    title: str
    value: T
    key: str | None = None


class Prompter(Protocol):
    def select(
        self,
        name: str,
        message: str,
        choices: Sequence[Choice[T]],
        *,
        autocomplete: bool = False,
    ) -> T: ...

    def text(self, name: str, message: str) -> str | None: ...


def match_choice(
    choices: Sequence[Choice[T]], answer: str, *, positional: bool = True
) -> Choice[T] | None:
    """Resolve a typed answer to one of `choices`.

    Accepts a 1-based position (when `positional`), an exact key or label, or a
    case-insensitive label fragment that matches exactly one choice.
    """

    raw = answer.strip()
    if not raw:
        return None

    if positional and raw.isdigit():
        idx = int(raw) - 1
        if 0 <= idx < len(choices):
            return choices[idx]

    folded = raw.casefold()
    for choice in choices:
        if choice.key is not None and choice.key.casefold() == folded:
            return choice
    for choice in choices:
        if choice.title.casefold() == folded:
            return choice

    if not positional:
        return None

    partial = [c for c in choices if folded in c.title.casefold()]
    if len(partial) == 1:
        return partial[0]
    return None


def choice_completer(choices: Sequence[Choice[T]]) -> Completer:
    """Fuzzy completion over whole choice labels.

    Labels contain spaces, so the completion replaces everything typed so far
    rather than the last word only.
    """

    return FuzzyCompleter(
        WordCompleter([c.title for c in choices], sentence=True, match_middle=True)
    )


class TerminalPrompter:
    """Interactive prompts on the controlling terminal.

    `overrides` maps prompt names to answers supplied up front (e.g. from the
    command line). Each override answers its prompt once.
    """

    def __init__(self, console: Console, overrides: Mapping[str, str] | None = None) -> None:
        self._console = console
        self._overrides = dict(overrides or {})
        self._session: PromptSession[str] | None = None

    def _ask(self, message: str, completer: Completer | None = None) -> str:
        if self._session is None:
            self._session = PromptSession()
        try:
            return self._session.prompt(
                f"{message} › ",
                completer=completer,
                complete_while_typing=completer is not None,
            )
        except (KeyboardInterrupt, EOFError):
            raise PromptCancelled(message) from None

    def _take_override(self, name: str) -> str | None:
        return self._overrides.pop(name, None)

    def select(
        self,
        name: str,
        message: str,
        choices: Sequence[Choice[T]],
        *,
        autocomplete: bool = False,
    ) -> T:
        if not choices:
            raise ValueError("select requires at least one choice")

        override = self._take_override(name)
        if override is not None:
            matched = match_choice(choices, override, positional=False)
            if matched is not None:
                logger.info("Answered prompt from override", extra={"prompt": name})
                return matched.value
            logger.warning(
                "Ignoring override that matches no choice",
                extra={"prompt": name, "answer": override},
            )

        self._console.print(f"[bold]{escape(message)}[/bold]")
        width = len(str(len(choices)))
        for i, choice in enumerate(choices, 1):
            self._console.print(f"  [cyan]{i:>{width}}[/cyan]  {escape(choice.title)}")

        completer = choice_completer(choices) if autocomplete else None
        while True:
            matched = match_choice(choices, self._ask(message, completer))
            if matched is not None:
                return matched.value
            self._console.print(
                f"[dim]Enter a number (1-{len(choices)}) or part of a name[/dim]"
            )

    def text(self, name: str, message: str) -> str | None:
        override = self._take_override(name)
        raw = override if override is not None else self._ask(message)
        return raw.strip() or None
