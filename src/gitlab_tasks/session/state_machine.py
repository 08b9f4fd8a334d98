from __future__ import annotations

import logging
from collections.abc import Callable, Mapping

from gitlab_tasks.ui.prompts import PromptCancelled

from .events import HANDLED_TRANSITIONS, Exit, SessionPhase, Transition

logger = logging.getLogger(__name__)

Handler = Callable[[Transition], Transition | None]


ALLOWED_TRANSITIONS: dict[SessionPhase, set[SessionPhase]] = {
    SessionPhase.UNINITIALIZED: {
        SessionPhase.PROJECT_SELECTION,
        SessionPhase.ISSUE_SELECTION,
        SessionPhase.TASK_MENU,
    },
    SessionPhase.PROJECT_SELECTION: {
        SessionPhase.PROJECT_SELECTION,
        SessionPhase.ISSUE_SELECTION,
        SessionPhase.EXIT,
    },
    SessionPhase.ISSUE_SELECTION: {
        SessionPhase.PROJECT_SELECTION,
        SessionPhase.TASK_MENU,
        SessionPhase.EXIT,
    },
    SessionPhase.TASK_MENU: {
        SessionPhase.TASK_MENU,
        SessionPhase.ISSUE_SELECTION,
        SessionPhase.CLONING,
        SessionPhase.PROJECT_SELECTION,
        SessionPhase.ITERATION_EDIT,
        SessionPhase.EXIT,
    },
    SessionPhase.CLONING: {SessionPhase.TASK_MENU, SessionPhase.EXIT},
    SessionPhase.ITERATION_EDIT: {
        SessionPhase.PROJECT_SELECTION,
        SessionPhase.TASK_MENU,
        SessionPhase.EXIT,
    },
    SessionPhase.EXIT: set(),
}


class IllegalTransitionError(ValueError):
    pass


def transition(*, current: SessionPhase, to: SessionPhase) -> SessionPhase:
    allowed = ALLOWED_TRANSITIONS.get(current, set())
    if to not in allowed:
        raise IllegalTransitionError(f"Illegal transition: {current.value} -> {to.value}")
    return to


class SessionRouter:
    """Dispatch transition requests to their single handler.

    Handlers return the next request (or None when there is nothing left to do),
    so `run` drives the session as a loop instead of nested calls. Only one
    handler is ever in flight.
    """

    def __init__(self, handlers: Mapping[type[Transition], Handler]) -> None:
        missing = [t.__name__ for t in HANDLED_TRANSITIONS if t not in handlers]
        if missing:
            raise ValueError(f"No handler registered for: {', '.join(missing)}")
        if Exit in handlers:
            raise ValueError("Exit is terminal and cannot have a handler")

        self._handlers = dict(handlers)
        self._phase = SessionPhase.UNINITIALIZED
        self._history: list[SessionPhase] = []

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def history(self) -> list[SessionPhase]:
        return list(self._history)

    def _enter(self, request: Transition) -> None:
        self._phase = transition(current=self._phase, to=request.phase)
        self._history.append(self._phase)

    def run(self, initial: Transition) -> int:
        """Drive the session from `initial` and return the process exit code."""

        request: Transition | None = initial
        try:
            while request is not None:
                self._enter(request)
                if isinstance(request, Exit):
                    logger.info("Session exit requested", extra={"code": request.code})
                    return request.code

                logger.debug("Dispatching", extra={"phase": self._phase.value})
                request = self._handlers[type(request)](request)
        except PromptCancelled:
            logger.info("Prompt cancelled; ending session", extra={"phase": self._phase.value})
            return 0

        logger.info("Session finished", extra={"phase": self._phase.value})
        return 0
