"""The interactive session as an explicit state machine.

This package introduces first-class types for:
- transition requests (what should happen next, with its payload)
- the router that dispatches them to one handler each
- the persisted session state (project, issue, iteration)
- the components that handle each request

Components never call each other directly; they return the next request and
the router decides who runs it.
"""

__all__: list[str] = []
