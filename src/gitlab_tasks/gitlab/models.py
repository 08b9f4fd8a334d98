"""Tracker values returned by the gateway.

These are frozen pydantic models so the session store can persist them verbatim
and read them back on the next run.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Project(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    path: str
    path_with_namespace: str = Field(default="")


class EpicLink(BaseModel):
    """The epic summary embedded in an issue payload."""

    model_config = ConfigDict(frozen=True)

    group_id: int
    iid: int
    title: str = Field(default="")


class Issue(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    iid: int
    project_id: int
    title: str
    web_url: str = Field(default="")
    labels: tuple[str, ...] = Field(default_factory=tuple)
    epic: EpicLink | None = Field(default=None)

    @property
    def display_name(self) -> str:
        return f"{self.iid} - {self.title}"


class Epic(BaseModel):
    model_config = ConfigDict(frozen=True)

    group_id: int
    iid: int
    reference: str = Field(description="Canonical full reference, e.g. 'group&9'")
    title: str = Field(default="")
