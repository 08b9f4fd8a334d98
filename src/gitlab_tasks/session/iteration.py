from __future__ import annotations

from gitlab_tasks.ui.prompts import Prompter

from .events import SelectProject, ShowTaskOperations, Transition
from .state import SessionContext


class IterationSetter:
    def __init__(self, *, prompter: Prompter, context: SessionContext) -> None:
        self._prompter = prompter
        self._context = context

    def change_iteration(self) -> Transition | None:
        iteration = self._prompter.text("iteration", "Iteration name")
        if not iteration:
            state = self._context.state
            if state.project is None or state.issue is None:
                return None
            return ShowTaskOperations(project=state.project, issue=state.issue)

        self._context.set_iteration(iteration)
        return SelectProject()
